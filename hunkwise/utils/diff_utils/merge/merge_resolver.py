"""
Three-way merge fallback and conflict resolution.

Resolution works on the text the merge left behind: either by splicing whole
regions out of the file lines, or by rewriting the merge editor's output
segments. Both forms are pure; they take text and return new text.
"""

from typing import Dict, List, Sequence, Union

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import ConflictResolutionError
from ..core.models import ConflictRegion, ConflictSegment, ResolutionChoice
from ..parsing.conflict_parser import (
    parse_conflict_regions,
    parse_output_segments,
    split_lines,
)

BASE = "base"


def _choice(choice: Union[ResolutionChoice, str]) -> ResolutionChoice:
    try:
        return ResolutionChoice(choice)
    except ValueError:
        raise ConflictResolutionError(f"Unknown resolution choice: {choice!r}",
                                      details={"choice": choice})


def perform_auto_merge(base: str, ours: str, theirs: str) -> str:
    """
    Merge three versions line by line at equal indices.

    This is a positional heuristic, not diff3: any insertion or deletion that
    shifts lines makes every following index disagree. It is only used when
    the backend cannot supply its own merged text with markers.

    Args:
        base: Common ancestor text
        ours: Current branch text
        theirs: Incoming branch text

    Returns:
        Merged text with ``OURS``/``THEIRS`` conflict blocks where both sides
        changed the same index differently
    """
    base_lines = split_lines(base)
    ours_lines = split_lines(ours)
    theirs_lines = split_lines(theirs)
    result: List[str] = []
    conflicts = 0

    for i in range(max(len(base_lines), len(ours_lines), len(theirs_lines))):
        base_line = base_lines[i] if i < len(base_lines) else ''
        ours_line = ours_lines[i] if i < len(ours_lines) else ''
        theirs_line = theirs_lines[i] if i < len(theirs_lines) else ''

        if ours_line == theirs_line:
            result.append(ours_line)
        elif ours_line == base_line:
            result.append(theirs_line)
        elif theirs_line == base_line:
            result.append(ours_line)
        else:
            result.extend(['<<<<<<< OURS', ours_line, '=======', theirs_line, '>>>>>>> THEIRS'])
            conflicts += 1

    logger.debug(f"Positional auto-merge produced {conflicts} conflict(s)")
    return '\n'.join(result)


def _chosen_lines(ours_lines: Sequence[str], theirs_lines: Sequence[str],
                  choice: ResolutionChoice) -> List[str]:
    chosen: List[str] = []
    if choice in (ResolutionChoice.OURS, ResolutionChoice.BOTH):
        chosen.extend(ours_lines)
    if choice in (ResolutionChoice.THEIRS, ResolutionChoice.BOTH):
        chosen.extend(theirs_lines)
    return chosen


def resolve_region_lines(lines: Sequence[str], region: ConflictRegion,
                         choice: Union[ResolutionChoice, str]) -> List[str]:
    """
    Replace one region's marker span in a list of file lines.

    Args:
        lines: Current file lines
        region: Region parsed from those lines
        choice: Side(s) to keep; ``both`` keeps ours followed by theirs

    Returns:
        New list of lines

    Raises:
        ConflictResolutionError: If the region's span is outside ``lines``
    """
    choice = _choice(choice)
    if not 0 <= region.start_line <= region.end_line < len(lines):
        raise ConflictResolutionError(
            f"Conflict {region.index} spans lines {region.start_line}-{region.end_line}, "
            f"outside a file of {len(lines)} lines",
            details={"index": region.index, "line_count": len(lines)},
        )

    replacement = _chosen_lines(region.ours_lines, region.theirs_lines, choice)
    return list(lines[:region.start_line]) + replacement + list(lines[region.end_line + 1:])


def resolve_conflict(text: str, region_index: int, choice: Union[ResolutionChoice, str]) -> str:
    """
    Resolve one conflict region of a file.

    Args:
        text: File content with conflict markers
        region_index: Index of the region as returned by ``parse_conflict_regions``
        choice: ``ours``, ``theirs`` or ``both``

    Returns:
        The file content with that region replaced
    """
    regions = parse_conflict_regions(text)
    if not 0 <= region_index < len(regions):
        raise ConflictResolutionError(
            f"Conflict {region_index} does not exist; file has {len(regions)} conflict(s)",
            details={"index": region_index, "count": len(regions)},
        )
    return '\n'.join(resolve_region_lines(split_lines(text), regions[region_index], choice))


def resolve_all_conflicts(text: str, choice: Union[ResolutionChoice, str]) -> str:
    """
    Resolve every conflict region of a file with the same choice.

    Regions are replaced from the bottom of the file upwards so that the line
    indices of regions not yet processed stay valid.
    """
    choice = _choice(choice)
    lines = split_lines(text)
    regions = parse_conflict_regions(text)
    for region in sorted(regions, key=lambda r: r.start_line, reverse=True):
        lines = resolve_region_lines(lines, region, choice)
    logger.debug(f"Resolved {len(regions)} conflict(s) with {choice.value}")
    return '\n'.join(lines)


def resolve_output_conflict(output: str, segment_index: int, choice: Union[ResolutionChoice, str]) -> str:
    """
    Resolve one conflict in the merge editor output.

    The output is rebuilt from its segments: resolved runs are copied, the
    targeted conflict is replaced by the chosen lines, and every other conflict
    is written back with its markers and original labels.

    Args:
        output: Current merge output
        segment_index: Index among the conflict segments only (0 is the first conflict)
        choice: ``ours``, ``theirs`` or ``both``

    Returns:
        The new merge output
    """
    choice = _choice(choice)
    segments = parse_output_segments(output)
    conflict_count = sum(1 for segment in segments if isinstance(segment, ConflictSegment))
    if not 0 <= segment_index < conflict_count:
        raise ConflictResolutionError(
            f"Conflict {segment_index} does not exist; output has {conflict_count} conflict(s)",
            details={"index": segment_index, "count": conflict_count},
        )

    result: List[str] = []
    conflict_index = 0
    for segment in segments:
        if not isinstance(segment, ConflictSegment):
            result.extend(segment.lines)
            continue
        if conflict_index == segment_index:
            result.extend(_chosen_lines(segment.ours_lines, segment.theirs_lines, choice))
        else:
            result.extend(segment.to_marker_lines())
        conflict_index += 1

    return '\n'.join(result)


def accept_side(side: str, base: str, ours: str, theirs: str) -> str:
    """Replace the whole merge output with one version of the file."""
    versions = {BASE: base, ResolutionChoice.OURS.value: ours, ResolutionChoice.THEIRS.value: theirs}
    key = side.value if isinstance(side, ResolutionChoice) else side
    if key not in versions:
        raise ConflictResolutionError(f"Cannot accept side {side!r}", details={"side": side})
    return versions[key]


def compute_line_origins(output: str, base: str, ours: str, theirs: str) -> Dict[int, str]:
    """
    Work out which branch each resolved output line came from.

    A line that is not in the base text is tagged ``ours`` if it only appears in
    our version, ``theirs`` if it only appears in theirs, and ``both`` if it
    appears in both. Lines inside unresolved conflicts are skipped but still
    advance the line counter, markers included.

    Returns:
        Mapping from output line index to origin tag
    """
    base_set = set(split_lines(base))
    ours_new = {line for line in split_lines(ours) if line not in base_set}
    theirs_new = {line for line in split_lines(theirs) if line not in base_set}

    origins: Dict[int, str] = {}
    line_index = 0
    for segment in parse_output_segments(output):
        if isinstance(segment, ConflictSegment):
            line_index += segment.marker_line_count
            continue
        for line in segment.lines:
            if line not in base_set:
                in_ours = line in ours_new
                in_theirs = line in theirs_new
                if in_ours and in_theirs:
                    origins[line_index] = ResolutionChoice.BOTH.value
                elif in_ours:
                    origins[line_index] = ResolutionChoice.OURS.value
                elif in_theirs:
                    origins[line_index] = ResolutionChoice.THEIRS.value
            line_index += 1

    return origins


def line_count(text: str) -> int:
    """Number of lines in a text; an empty text has none."""
    return len(split_lines(text)) if text else 0


def diff_count(text: str, base: str) -> int:
    """Number of line indices at which two texts differ positionally."""
    lines = split_lines(text)
    base_lines = split_lines(base)
    return sum(
        1 for i in range(max(len(lines), len(base_lines)))
        if (lines[i] if i < len(lines) else None) != (base_lines[i] if i < len(base_lines) else None)
    )
