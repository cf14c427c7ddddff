"""
Conversion of hunks into side-by-side rows.
"""

from collections import deque
from typing import List, Sequence

from ..core.models import DiffHunk, DiffLine, LineOrigin, SplitLine


def _flush(deletions: deque, additions: deque, rows: List[SplitLine]) -> None:
    while deletions or additions:
        left = deletions.popleft() if deletions else None
        right = additions.popleft() if additions else None
        rows.append(SplitLine(left, right))


def convert_to_split_lines(hunks: Sequence[DiffHunk]) -> List[SplitLine]:
    """
    Lay out hunks as rows of (old, new) line pairs.

    Each hunk starts with a header row. Deletions and additions are queued and
    paired up whenever a context line arrives or the hunk ends, so a replaced
    block reads across; context lines appear on both sides.

    Args:
        hunks: The hunks of a DiffFile

    Returns:
        Rows for the split view; a side is None where the other side has no
        counterpart
    """
    rows: List[SplitLine] = []

    for hunk in hunks:
        header = DiffLine(hunk.header, LineOrigin.HUNK_HEADER)
        rows.append(SplitLine(header, header))

        deletions: deque = deque()
        additions: deque = deque()
        for line in hunk.lines:
            if line.origin == LineOrigin.DELETION:
                deletions.append(line)
            elif line.origin == LineOrigin.ADDITION:
                additions.append(line)
            else:
                _flush(deletions, additions, rows)
                rows.append(SplitLine(line, line))

        _flush(deletions, additions, rows)

    return rows
