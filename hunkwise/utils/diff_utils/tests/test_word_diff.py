"""
Tests for word-level line diffs.
"""

import os
import unittest
from unittest import mock

from hunkwise.utils.diff_utils.core.config import ENV_WORD_DIFF_MAX_CELLS
from hunkwise.utils.diff_utils.core.models import DiffLine, LineOrigin, WordSegment
from hunkwise.utils.diff_utils.inline.word_diff import (
    compute_word_diff,
    pair_changed_lines,
    tokenize,
)


def _join(segments):
    return "".join(segment.text for segment in segments)


class TestTokenize(unittest.TestCase):
    """Test cases for splitting lines into tokens."""

    def test_token_classes(self):
        self.assertEqual(tokenize("foo(bar,  baz)"), ["foo", "(", "bar", ",", "  ", "baz", ")"])

    def test_punctuation_is_single_character(self):
        self.assertEqual(tokenize("a->b"), ["a", "-", ">", "b"])

    def test_tokens_rebuild_line(self):
        for line in ["", "   ", "x = y + 1;", "\tindent\ttabs ", "unicode: café ✓"]:
            with self.subTest(line=line):
                self.assertEqual("".join(tokenize(line)), line)


class TestComputeWordDiff(unittest.TestCase):
    """Test cases for compute_word_diff."""

    def test_single_word_change(self):
        result = compute_word_diff("return a + b", "return a - b")
        self.assertEqual(result.old_segments, (
            WordSegment("return a ", False),
            WordSegment("+", True),
            WordSegment(" b", False),
        ))
        self.assertEqual(result.new_segments, (
            WordSegment("return a ", False),
            WordSegment("-", True),
            WordSegment(" b", False),
        ))

    def test_identical_lines_have_no_changes(self):
        result = compute_word_diff("same line", "same line")
        self.assertEqual(result.old_segments, (WordSegment("same line", False),))
        self.assertEqual(result.new_segments, (WordSegment("same line", False),))

    def test_empty_old_side(self):
        result = compute_word_diff("", "added text")
        self.assertEqual(result.old_segments, ())
        self.assertEqual(result.new_segments, (WordSegment("added text", True),))

    def test_empty_new_side(self):
        result = compute_word_diff("removed", "")
        self.assertEqual(result.old_segments, (WordSegment("removed", True),))
        self.assertEqual(result.new_segments, ())

    def test_segments_reproduce_inputs(self):
        pairs = [
            ("def foo(a, b):", "def foo(a, b, c):"),
            ("    x = 1", "\tx = 2"),
            ("completely different", "nothing alike here!"),
            ("a b c d e", "e d c b a"),
            ("trailing ", "trailing"),
        ]
        for old, new in pairs:
            with self.subTest(old=old, new=new):
                result = compute_word_diff(old, new)
                self.assertEqual(_join(result.old_segments), old)
                self.assertEqual(_join(result.new_segments), new)

    def test_adjacent_segments_alternate(self):
        result = compute_word_diff("one two three four", "one 2 three 4")
        flags = [segment.changed for segment in result.new_segments]
        for first, second in zip(flags, flags[1:]):
            self.assertNotEqual(first, second)

    def test_large_lines_fall_back_to_whole_line(self):
        with mock.patch.dict(os.environ, {ENV_WORD_DIFF_MAX_CELLS: "4"}):
            result = compute_word_diff("a b c", "a b d")
        self.assertEqual(result.old_segments, (WordSegment("a b c", True),))
        self.assertEqual(result.new_segments, (WordSegment("a b d", True),))


class TestPairChangedLines(unittest.TestCase):
    """Test cases for pairing deletions with additions."""

    def test_pairs_by_position(self):
        lines = [
            DiffLine("ctx", LineOrigin.CONTEXT, 1, 1),
            DiffLine("old1", LineOrigin.DELETION, 2, None),
            DiffLine("old2", LineOrigin.DELETION, 3, None),
            DiffLine("new1", LineOrigin.ADDITION, None, 2),
            DiffLine("new2", LineOrigin.ADDITION, None, 3),
            DiffLine("new3", LineOrigin.ADDITION, None, 4),
        ]
        self.assertEqual(pair_changed_lines(lines), {1: 3, 2: 4})

    def test_context_breaks_pairing(self):
        lines = [
            DiffLine("old", LineOrigin.DELETION, 1, None),
            DiffLine("ctx", LineOrigin.CONTEXT, 2, 1),
            DiffLine("new", LineOrigin.ADDITION, None, 2),
        ]
        self.assertEqual(pair_changed_lines(lines), {})

    def test_additions_before_deletions_not_paired(self):
        lines = [
            DiffLine("new", LineOrigin.ADDITION, None, 1),
            DiffLine("old", LineOrigin.DELETION, 1, None),
        ]
        self.assertEqual(pair_changed_lines(lines), {})


if __name__ == "__main__":
    unittest.main()
