"""
Tests for whitespace-only change detection and inline rendering.
"""

import unittest

from hunkwise.utils.diff_utils.core.models import DiffLine, InlineDiffSegment, LineOrigin, SegmentType
from hunkwise.utils.diff_utils.inline.whitespace_diff import (
    compute_inline_whitespace_diff,
    find_whitespace_only_pairs,
    is_whitespace_only_change,
)


def _rebuild(segments, side_type):
    return "".join(s.text for s in segments if s.type in (SegmentType.UNCHANGED, side_type))


class TestIsWhitespaceOnlyChange(unittest.TestCase):
    """Test cases for is_whitespace_only_change."""

    def test_indentation_change(self):
        self.assertTrue(is_whitespace_only_change("    return x\n", "\treturn x\n"))

    def test_internal_whitespace_change(self):
        self.assertTrue(is_whitespace_only_change("a = b", "a=b"))

    def test_trailing_newline_ignored(self):
        self.assertTrue(is_whitespace_only_change("value\n", "value"))

    def test_content_change(self):
        self.assertFalse(is_whitespace_only_change("return x", "return y"))


class TestComputeInlineWhitespaceDiff(unittest.TestCase):
    """Test cases for compute_inline_whitespace_diff."""

    def test_changed_indentation(self):
        segments = compute_inline_whitespace_diff("    foo()", "\tfoo()")
        self.assertEqual(segments, [
            InlineDiffSegment("    ", SegmentType.REMOVED),
            InlineDiffSegment("\t", SegmentType.ADDED),
            InlineDiffSegment("foo()", SegmentType.UNCHANGED),
        ])

    def test_identical_whitespace_is_unchanged(self):
        segments = compute_inline_whitespace_diff("  a  b", "  a b")
        self.assertEqual(segments, [
            InlineDiffSegment("  ", SegmentType.UNCHANGED),
            InlineDiffSegment("a", SegmentType.UNCHANGED),
            InlineDiffSegment("  ", SegmentType.REMOVED),
            InlineDiffSegment(" ", SegmentType.ADDED),
            InlineDiffSegment("b", SegmentType.UNCHANGED),
        ])

    def test_removed_trailing_whitespace(self):
        segments = compute_inline_whitespace_diff("x = 1   \n", "x = 1\n")
        self.assertEqual(segments[-1], InlineDiffSegment("   ", SegmentType.REMOVED))

    def test_segments_rebuild_both_sides(self):
        pairs = [
            ("    if x:\n", "        if x:\n"),
            ("a  =  b", "a = b"),
            ("\t\tcall( )", "  call( )  "),
            ("no change", "no change"),
            ("a = b", "a=b"),
            ("a b", "ab"),
            ("f( x )", "f(x)"),
            ("ab", "a b"),
        ]
        for old, new in pairs:
            with self.subTest(old=old, new=new):
                self.assertTrue(is_whitespace_only_change(old, new))
                segments = compute_inline_whitespace_diff(old, new)
                self.assertEqual(_rebuild(segments, SegmentType.REMOVED), old.rstrip("\n"))
                self.assertEqual(_rebuild(segments, SegmentType.ADDED), new.rstrip("\n"))

    def test_whitespace_removed_inside_text(self):
        segments = compute_inline_whitespace_diff("a = b", "a=b")
        self.assertEqual(segments, [
            InlineDiffSegment("a", SegmentType.UNCHANGED),
            InlineDiffSegment(" ", SegmentType.REMOVED),
            InlineDiffSegment("=", SegmentType.UNCHANGED),
            InlineDiffSegment(" ", SegmentType.REMOVED),
            InlineDiffSegment("b", SegmentType.UNCHANGED),
        ])

    def test_mismatched_content_terminates(self):
        segments = compute_inline_whitespace_diff("abc", "xyz")
        self.assertTrue(segments)


class TestFindWhitespaceOnlyPairs(unittest.TestCase):
    """Test cases for find_whitespace_only_pairs."""

    def test_adjacent_pair(self):
        lines = [
            DiffLine("ctx", LineOrigin.CONTEXT, 1, 1),
            DiffLine("  x", LineOrigin.DELETION, 2, None),
            DiffLine("    x", LineOrigin.ADDITION, None, 2),
        ]
        self.assertEqual(find_whitespace_only_pairs(lines), {1: 2})

    def test_only_adjacent_lines_pair(self):
        lines = [
            DiffLine("  x", LineOrigin.DELETION, 1, None),
            DiffLine("  y", LineOrigin.DELETION, 2, None),
            DiffLine("x", LineOrigin.ADDITION, None, 1),
            DiffLine("y", LineOrigin.ADDITION, None, 2),
        ]
        # Only index 1 -> 2 is adjacent, and "  y" vs "x" differs in content
        self.assertEqual(find_whitespace_only_pairs(lines), {})

    def test_paired_addition_is_skipped(self):
        lines = [
            DiffLine("a ", LineOrigin.DELETION, 1, None),
            DiffLine("a", LineOrigin.ADDITION, None, 1),
            DiffLine("b ", LineOrigin.DELETION, 2, None),
            DiffLine("b", LineOrigin.ADDITION, None, 2),
        ]
        self.assertEqual(find_whitespace_only_pairs(lines), {0: 1, 2: 3})

    def test_content_change_not_paired(self):
        lines = [
            DiffLine("a", LineOrigin.DELETION, 1, None),
            DiffLine("b", LineOrigin.ADDITION, None, 1),
        ]
        self.assertEqual(find_whitespace_only_pairs(lines), {})


if __name__ == "__main__":
    unittest.main()
