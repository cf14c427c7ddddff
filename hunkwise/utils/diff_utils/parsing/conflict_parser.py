"""
Parsing of conflict markers left in a file by a conflicting merge.

Two views of the same marker grammar are provided: ConflictRegion objects that
record absolute line spans so a region can be sliced out and replaced, and an
ordered list of output segments used by the merge editor to rebuild the text.

Nested markers are not supported. An opening marker always starts a new
conflict, and the first closing marker after a separator closes it. A conflict
that never closes is left out of the region list and kept as plain text in the
segment list, so parsing never raises and never loses lines.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from hunkwise.utils.logging_utils import logger
from ..core.config import (
    DEFAULT_OURS_LABEL,
    DEFAULT_THEIRS_LABEL,
    MARKER_BASE,
    MARKER_OURS,
    MARKER_SEPARATOR,
    MARKER_THEIRS,
)
from ..core.models import ConflictRegion, ConflictSegment, ResolvedSegment

OutputSegment = Union[ResolvedSegment, ConflictSegment]


@dataclass
class _MarkerBlock:
    """Line indices of the markers of one closed conflict."""
    start: int
    separator: int
    end: int
    base: Optional[int] = None

    @property
    def ours_end(self) -> int:
        return self.base if self.base is not None else self.separator


def split_lines(text: str) -> List[str]:
    """Split text on ``\\n`` the way the merge editor counts lines."""
    return text.split('\n')


def _scan_markers(lines: Sequence[str]) -> List[_MarkerBlock]:
    blocks: List[_MarkerBlock] = []
    start = base = separator = None

    for i, line in enumerate(lines):
        if line.startswith(MARKER_OURS):
            if start is not None:
                logger.debug(f"Conflict opened at line {start} was never closed; restarting at line {i}")
            start, base, separator = i, None, None
        elif start is None:
            continue
        elif separator is None:
            if base is None and line.startswith(MARKER_BASE):
                base = i
            elif line.startswith(MARKER_SEPARATOR):
                separator = i
        elif line.startswith(MARKER_THEIRS):
            blocks.append(_MarkerBlock(start=start, separator=separator, end=i, base=base))
            start = base = separator = None

    if start is not None:
        logger.debug(f"Conflict opened at line {start} is unterminated and was ignored")

    return blocks


def parse_conflict_regions(text: str) -> List[ConflictRegion]:
    """
    Extract structured conflict regions from conflicted file text.

    Args:
        text: File content containing conflict markers

    Returns:
        Regions in file order; empty if the text has no complete conflicts
    """
    lines = split_lines(text)
    regions: List[ConflictRegion] = []

    for index, block in enumerate(_scan_markers(lines)):
        base_lines = None
        if block.base is not None:
            base_lines = tuple(lines[block.base + 1:block.separator])
        regions.append(ConflictRegion(
            index=index,
            start_line=block.start,
            end_line=block.end,
            ours_start=block.start + 1,
            ours_end=block.ours_end,
            theirs_start=block.separator + 1,
            theirs_end=block.end,
            ours_lines=tuple(lines[block.start + 1:block.ours_end]),
            theirs_lines=tuple(lines[block.separator + 1:block.end]),
            base_lines=base_lines,
        ))

    logger.debug(f"Parsed {len(regions)} conflict region(s)")
    return regions


def _label(marker_line: str, default: str) -> str:
    return marker_line[7:].strip() or default


def parse_output_segments(text: str) -> List[OutputSegment]:
    """
    Split merge output into resolved runs and conflict segments.

    Marker labels are kept so that an unresolved conflict can be written back
    exactly as it was found.

    Args:
        text: Merge output, possibly containing conflict markers

    Returns:
        Segments whose serialization reproduces the text
    """
    lines = split_lines(text)
    segments: List[OutputSegment] = []
    position = 0

    for block in _scan_markers(lines):
        if block.start > position:
            segments.append(ResolvedSegment(tuple(lines[position:block.start])))

        base_lines = None
        base_label = ""
        if block.base is not None:
            base_lines = tuple(lines[block.base + 1:block.separator])
            base_label = lines[block.base][7:].strip()

        segments.append(ConflictSegment(
            ours_lines=tuple(lines[block.start + 1:block.ours_end]),
            theirs_lines=tuple(lines[block.separator + 1:block.end]),
            ours_label=_label(lines[block.start], DEFAULT_OURS_LABEL),
            theirs_label=_label(lines[block.end], DEFAULT_THEIRS_LABEL),
            base_lines=base_lines,
            base_label=base_label,
        ))
        position = block.end + 1

    if position < len(lines):
        segments.append(ResolvedSegment(tuple(lines[position:])))

    return segments


def serialize_segments(segments: Sequence[OutputSegment]) -> str:
    """Join segments back into text, writing markers for every conflict."""
    result: List[str] = []
    for segment in segments:
        if isinstance(segment, ConflictSegment):
            result.extend(segment.to_marker_lines())
        else:
            result.extend(segment.lines)
    return '\n'.join(result)


def count_unresolved(text: str) -> int:
    """Number of complete conflicts remaining in the text."""
    return len(_scan_markers(split_lines(text)))


def has_conflict_markers(text: str) -> bool:
    """Check if the text still contains at least one complete conflict."""
    return count_unresolved(text) > 0
