"""
Detection and inline rendering of whitespace-only line changes.

A deletion immediately followed by an addition that differs from it only in
whitespace is shown as a single line with the changed whitespace runs marked,
rather than as a removed line and an added line.
"""

import re
from typing import Dict, List, Sequence

from ..core.models import DiffLine, InlineDiffSegment, LineOrigin, SegmentType

_WHITESPACE = re.compile(r'\s')
_ALL_WHITESPACE = re.compile(r'\s+')


def _strip_trailing_newline(text: str) -> str:
    return text[:-1] if text.endswith('\n') else text


def is_whitespace_only_change(old_content: str, new_content: str) -> bool:
    """
    Check if two lines differ only in whitespace.

    Trailing newlines are ignored, then every whitespace character (leading,
    internal and trailing) is removed from both sides before comparing.

    Args:
        old_content: The old line
        new_content: The new line

    Returns:
        True if the non-whitespace characters are identical
    """
    strip = lambda s: _ALL_WHITESPACE.sub('', _strip_trailing_newline(s))
    return strip(old_content) == strip(new_content)


def _whitespace_run_end(text: str, start: int) -> int:
    end = start
    while end < len(text) and _WHITESPACE.match(text[end]):
        end += 1
    return end


def _common_text_length(old_str: str, oi: int, new_str: str, ni: int) -> int:
    length = 0
    while (oi + length < len(old_str) and ni + length < len(new_str)
           and old_str[oi + length] == new_str[ni + length]
           and not _WHITESPACE.match(new_str[ni + length])):
        length += 1
    return length


def compute_inline_whitespace_diff(old_content: str, new_content: str) -> List[InlineDiffSegment]:
    """
    Compute inline segments for two lines that differ only in whitespace.

    Both strings are walked in lockstep. Each step first takes the whitespace
    run at both cursors, emitting it unchanged when identical or as a removed
    run followed by an added run when not, then takes the non-whitespace text
    the two cursors share, advancing both.

    Args:
        old_content: The old line
        new_content: The new line

    Returns:
        Ordered segments; unchanged+removed text rebuilds the old line and
        unchanged+added text rebuilds the new line (without trailing newline)
    """
    old_str = _strip_trailing_newline(old_content)
    new_str = _strip_trailing_newline(new_content)
    segments: List[InlineDiffSegment] = []

    oi = 0
    ni = 0
    while oi < len(old_str) or ni < len(new_str):
        start_oi, start_ni = oi, ni

        old_ws_end = _whitespace_run_end(old_str, oi)
        new_ws_end = _whitespace_run_end(new_str, ni)
        old_ws = old_str[oi:old_ws_end]
        new_ws = new_str[ni:new_ws_end]
        oi, ni = old_ws_end, new_ws_end

        if old_ws != new_ws:
            if old_ws:
                segments.append(InlineDiffSegment(old_ws, SegmentType.REMOVED))
            if new_ws:
                segments.append(InlineDiffSegment(new_ws, SegmentType.ADDED))
        elif old_ws:
            segments.append(InlineDiffSegment(old_ws, SegmentType.UNCHANGED))

        # Stops at whitespace on either side; the next pass takes that run
        length = _common_text_length(old_str, oi, new_str, ni)
        text = new_str[ni:ni + length]
        oi += length
        ni += length
        if text:
            segments.append(InlineDiffSegment(text, SegmentType.UNCHANGED))

        if oi == start_oi and ni == start_ni:
            # Inputs disagree on non-whitespace content; report the rest as replaced
            if oi < len(old_str):
                segments.append(InlineDiffSegment(old_str[oi:], SegmentType.REMOVED))
            if ni < len(new_str):
                segments.append(InlineDiffSegment(new_str[ni:], SegmentType.ADDED))
            break

    return segments


def find_whitespace_only_pairs(lines: Sequence[DiffLine]) -> Dict[int, int]:
    """
    Scan hunk lines for deletion->addition pairs that differ only in whitespace.

    Pairing is greedy from left to right and only looks at immediately
    adjacent indices; a paired addition is skipped so it cannot start a new
    pair.

    Args:
        lines: The lines of a hunk

    Returns:
        Mapping from deletion line index to its paired addition line index
    """
    pairs: Dict[int, int] = {}

    i = 0
    while i < len(lines) - 1:
        current = lines[i]
        following = lines[i + 1]
        if (current.origin == LineOrigin.DELETION
                and following.origin == LineOrigin.ADDITION
                and is_whitespace_only_change(current.content, following.content)):
            pairs[i] = i + 1
            i += 2
            continue
        i += 1

    return pairs
