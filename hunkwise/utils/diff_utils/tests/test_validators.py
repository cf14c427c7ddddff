"""
Tests for selection and patch validation.
"""

import unittest

from hunkwise.utils.diff_utils.core.exceptions import StaleSelectionError
from hunkwise.utils.diff_utils.core.models import DiffFile, DiffLine, LineKey, LineOrigin
from hunkwise.utils.diff_utils.parsing.diff_parser import build_hunk
from hunkwise.utils.diff_utils.validation.validators import (
    LineSelection,
    validate_patch_headers,
    validate_selection,
)


def make_file():
    first = build_hunk(1, 1, [
        DiffLine("a", LineOrigin.CONTEXT, 1, 1),
        DiffLine("b", LineOrigin.DELETION, 2, None),
        DiffLine("c", LineOrigin.DELETION, 3, None),
        DiffLine("C", LineOrigin.ADDITION, None, 2),
        DiffLine("d", LineOrigin.CONTEXT, 4, 3),
    ])
    second = build_hunk(10, 9, [
        DiffLine("x", LineOrigin.CONTEXT, 10, 9),
        DiffLine("y", LineOrigin.ADDITION, None, 10),
    ])
    return DiffFile(path="f.txt", hunks=(first, second))


class TestValidateSelection(unittest.TestCase):
    """Test cases for validate_selection."""

    def test_valid_keys(self):
        validate_selection(make_file(), [LineKey(0, 1), LineKey(1, 1), LineKey(0, 0)])

    def test_stale_hunk(self):
        with self.assertRaises(StaleSelectionError) as ctx:
            validate_selection(make_file(), [LineKey(2, 0)])
        self.assertEqual(ctx.exception.details["stale_keys"], [(2, 0)])

    def test_stale_line(self):
        with self.assertRaises(StaleSelectionError):
            validate_selection(make_file(), [LineKey(1, 2)])


class TestValidatePatchHeaders(unittest.TestCase):
    """Test cases for validate_patch_headers."""

    def test_consistent_patch(self):
        patch = "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n a\n-b\n+B\n\\ No newline at end of file\n"
        self.assertEqual(validate_patch_headers(patch), [])

    def test_mismatched_counts(self):
        patch = "--- a/f\n+++ b/f\n@@ -1,2 +1,3 @@\n a\n b\n+B\n c\n"
        problems = validate_patch_headers(patch)
        self.assertEqual(len(problems), 1)
        self.assertIn("@@ -1,3 +1,4 @@", problems[0])

    def test_file_headers_not_counted(self):
        self.assertEqual(validate_patch_headers("--- a/f\n+++ b/f\n"), [])


class TestLineSelection(unittest.TestCase):
    """Test cases for LineSelection."""

    def test_toggle(self):
        selection = LineSelection().toggle(LineKey(0, 1))
        self.assertIn(LineKey(0, 1), selection)
        self.assertNotIn(LineKey(0, 1), selection.toggle((0, 1)))

    def test_immutable(self):
        original = LineSelection([(0, 1)])
        original.toggle(LineKey(0, 2))
        self.assertEqual(len(original), 1)

    def test_select_hunk_only_changes(self):
        selection = LineSelection().select_hunk(make_file(), 0)
        self.assertEqual(list(selection), [LineKey(0, 1), LineKey(0, 2), LineKey(0, 3)])

    def test_select_range(self):
        selection = LineSelection().select_range(make_file(), LineKey(0, 3), LineKey(0, 0))
        self.assertEqual(selection.for_hunk(0), frozenset({1, 2, 3}))

    def test_select_range_across_hunks(self):
        selection = LineSelection().select_range(make_file(), LineKey(0, 1), LineKey(1, 1))
        self.assertEqual(list(selection), [LineKey(1, 1)])

    def test_clear_and_equality(self):
        selection = LineSelection([(0, 1), (1, 1)])
        self.assertEqual(selection, LineSelection([(1, 1), (0, 1)]))
        self.assertEqual(len(selection.clear()), 0)


if __name__ == "__main__":
    unittest.main()
