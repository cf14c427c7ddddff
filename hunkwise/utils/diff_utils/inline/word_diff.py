"""
Word-level diff between an old and a new version of a single line.

Lines are split into atomic tokens (whitespace runs, word runs and single
punctuation characters), the longest common subsequence of the two token
lists is found with the classic dynamic-programming table, and tokens outside
the LCS are reported as changed.
"""

import re
from typing import Dict, List, Sequence, Tuple

from hunkwise.utils.logging_utils import logger
from ..core.config import get_word_diff_max_cells
from ..core.models import DiffLine, LineOrigin, WordDiffResult, WordSegment

TOKEN_PATTERN = re.compile(r'(\s+|[^\s\w]|[\w]+)')


def tokenize(text: str) -> List[str]:
    """
    Split a line into word diff tokens.

    Args:
        text: The line to split

    Returns:
        Tokens whose concatenation is exactly ``text``
    """
    return TOKEN_PATTERN.findall(text)


def _lcs_flags(old_tokens: Sequence[str], new_tokens: Sequence[str]) -> Tuple[List[bool], List[bool]]:
    """
    Mark which tokens on each side belong to the longest common subsequence.

    Returns:
        Two lists of booleans, True where the token is part of the LCS
    """
    m, n = len(old_tokens), len(new_tokens)
    table = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(1, m + 1):
        row = table[i]
        prev = table[i - 1]
        old_token = old_tokens[i - 1]
        for j in range(1, n + 1):
            if old_token == new_tokens[j - 1]:
                row[j] = prev[j - 1] + 1
            elif prev[j] >= row[j - 1]:
                row[j] = prev[j]
            else:
                row[j] = row[j - 1]

    old_in_lcs = [False] * m
    new_in_lcs = [False] * n
    i, j = m, n
    while i > 0 and j > 0:
        if old_tokens[i - 1] == new_tokens[j - 1]:
            old_in_lcs[i - 1] = True
            new_in_lcs[j - 1] = True
            i -= 1
            j -= 1
        elif table[i - 1][j] >= table[i][j - 1]:
            i -= 1
        else:
            j -= 1

    return old_in_lcs, new_in_lcs


def _merge_segments(tokens: Sequence[str], in_lcs: Sequence[bool]) -> Tuple[WordSegment, ...]:
    """Collapse consecutive tokens with the same changed flag into segments."""
    segments: List[WordSegment] = []
    buffer: List[str] = []
    current_changed = None

    for token, common in zip(tokens, in_lcs):
        changed = not common
        if current_changed is not None and changed != current_changed:
            segments.append(WordSegment("".join(buffer), current_changed))
            buffer = []
        buffer.append(token)
        current_changed = changed

    if buffer:
        segments.append(WordSegment("".join(buffer), current_changed))

    return tuple(segments)


def compute_word_diff(old_line: str, new_line: str) -> WordDiffResult:
    """
    Compute the word-level diff between two lines.

    Args:
        old_line: Content of the deleted line
        new_line: Content of the added line

    Returns:
        WordDiffResult whose old segments concatenate back to ``old_line`` and
        whose new segments concatenate back to ``new_line``
    """
    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)

    # Degenerate inputs skip the table entirely
    if not old_tokens or not new_tokens:
        old_segments = (WordSegment(old_line, True),) if old_tokens else ()
        new_segments = (WordSegment(new_line, True),) if new_tokens else ()
        return WordDiffResult(old_segments, new_segments)

    cells = len(old_tokens) * len(new_tokens)
    if cells > get_word_diff_max_cells():
        logger.debug(f"Word diff skipped: {cells} cells exceeds the configured limit")
        return WordDiffResult((WordSegment(old_line, True),), (WordSegment(new_line, True),))

    old_in_lcs, new_in_lcs = _lcs_flags(old_tokens, new_tokens)
    return WordDiffResult(
        _merge_segments(old_tokens, old_in_lcs),
        _merge_segments(new_tokens, new_in_lcs),
    )


def pair_changed_lines(lines: Sequence[DiffLine]) -> Dict[int, int]:
    """
    Pair deletions with the additions that replace them inside one hunk.

    Only considers a contiguous run of deletions immediately followed by a
    contiguous run of additions, and pairs them 1:1 by position. Extra lines
    on the longer side stay unpaired.

    Args:
        lines: The lines of a hunk

    Returns:
        Mapping from deletion line index to its paired addition line index
    """
    pairs: Dict[int, int] = {}
    i = 0
    count = len(lines)

    while i < count:
        if lines[i].origin != LineOrigin.DELETION:
            i += 1
            continue

        del_start = i
        while i < count and lines[i].origin == LineOrigin.DELETION:
            i += 1
        add_start = i
        while i < count and lines[i].origin == LineOrigin.ADDITION:
            i += 1

        for offset in range(min(add_start - del_start, i - add_start)):
            pairs[del_start + offset] = add_start + offset

    return pairs
