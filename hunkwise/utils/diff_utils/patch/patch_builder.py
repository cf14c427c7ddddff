"""
Construction of unified diff patches for staging and unstaging.

Two kinds of patch are built from an already computed DiffFile: a patch for
one whole hunk, and a patch for an arbitrary subset of changed lines across
any number of hunks. Both produce single-file unified diff text terminated by
a newline, ready to be handed to the backend's patch-apply call.

An empty string means there is nothing to apply. Callers must check for it and
must not submit it.
"""

from typing import Dict, Iterable, List, Optional, Set

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import StaleSelectionError
from ..core.models import DiffFile, DiffHunk, DiffLine, FileStatus, LineKey, LineOrigin
from ..core.utils import format_hunk_header, strip_line_ending
from ..parsing.diff_parser import NO_NEWLINE_MARKER
from ..validation.validators import validate_selection

_NO_OLD_SIDE = (FileStatus.NEW, FileStatus.UNTRACKED)
_NO_NEW_SIDE = (FileStatus.DELETED,)


def build_file_header(path: str, status: FileStatus) -> List[str]:
    """
    Build the ``---``/``+++`` lines for a patch.

    New and untracked files have no old side and deleted files have no new
    side; those sides are written as ``/dev/null``.
    """
    old_side = '--- /dev/null' if status in _NO_OLD_SIDE else f'--- a/{path}'
    new_side = '+++ /dev/null' if status in _NO_NEW_SIDE else f'+++ b/{path}'
    return [old_side, new_side]


def _prefixed(prefix: str, line: DiffLine) -> str:
    return prefix + strip_line_ending(line.content)


def _get_hunk(diff_file: DiffFile, hunk_index: int) -> DiffHunk:
    if not 0 <= hunk_index < len(diff_file.hunks):
        raise StaleSelectionError(
            f"Hunk {hunk_index} is not in the current diff of {diff_file.path}",
            details={"path": diff_file.path, "hunk_index": hunk_index},
        )
    return diff_file.hunks[hunk_index]


def build_hunk_patch(diff_file: DiffFile, hunk_index: int) -> str:
    """
    Build a patch containing one whole hunk.

    The hunk's own header is reused (trimmed) and every line is re-prefixed by
    its origin. Metadata lines are skipped and end-of-file markers become the
    literal ``\\ No newline at end of file`` line.

    Args:
        diff_file: The DiffFile the hunk belongs to
        hunk_index: Index of the hunk in ``diff_file.hunks``

    Returns:
        The patch text, ending with a newline

    Raises:
        StaleSelectionError: If the hunk index is out of range
    """
    hunk = _get_hunk(diff_file, hunk_index)
    lines = build_file_header(diff_file.path, diff_file.status)
    lines.append(hunk.header.strip())

    for line in hunk.lines:
        if line.origin.is_metadata:
            continue
        if line.origin.is_eofnl:
            lines.append(NO_NEWLINE_MARKER)
        elif line.origin == LineOrigin.ADDITION:
            lines.append(_prefixed('+', line))
        elif line.origin == LineOrigin.DELETION:
            lines.append(_prefixed('-', line))
        else:
            lines.append(_prefixed(' ', line))

    logger.debug(f"Built hunk patch for {diff_file.path} hunk {hunk_index} ({len(hunk.lines)} lines)")
    return '\n'.join(lines) + '\n'


def _place_eofnl_markers(body: List[str]) -> List[str]:
    """
    Make every no-newline marker describe a line that is last on its side.

    Dropping unselected changes can leave lines after a line that had no
    final newline. A marker is removed when its line is no longer last on the
    side it annotates. A context line that is still last on one side only is
    split into a removal and an addition, with the marker on that side.
    """
    placed: List[str] = []
    for position, text in enumerate(body):
        if text != NO_NEWLINE_MARKER:
            placed.append(text)
            continue

        later = body[position + 1:]
        old_continues = any(line[:1] in (' ', '-') for line in later)
        new_continues = any(line[:1] in (' ', '+') for line in later)
        previous = placed.pop()
        prefix, content = previous[:1], previous[1:]

        if prefix == ' ':
            if old_continues and new_continues:
                placed.append(previous)
            elif new_continues:
                placed.extend(['-' + content, NO_NEWLINE_MARKER, '+' + content])
            elif old_continues:
                placed.extend(['-' + content, '+' + content, NO_NEWLINE_MARKER])
            else:
                placed.extend([previous, NO_NEWLINE_MARKER])
        elif (prefix == '-' and old_continues) or (prefix == '+' and new_continues):
            placed.append(previous)
        else:
            placed.extend([previous, NO_NEWLINE_MARKER])
    return placed


def _build_partial_hunk(hunk: DiffHunk, selected: Set[int], reverse: bool) -> Optional[List[str]]:
    """
    Rewrite one hunk so only the selected changes remain.

    When staging (``reverse`` False) the patch is applied forwards to the index,
    which still holds the old side: an unselected deletion must stay in the
    file, so it becomes context, and an unselected addition is dropped.

    When unstaging (``reverse`` True) the patch is applied in reverse to an
    index that holds the new side, so the roles swap: an unselected addition
    becomes context and an unselected deletion is dropped.

    Returns:
        Header and body lines, or None if no change survived
    """
    body: List[str] = []
    old_count = 0
    new_count = 0
    has_change = False
    last_kept = False

    for index, line in enumerate(hunk.lines):
        origin = line.origin

        if origin.is_metadata:
            continue

        if origin.is_eofnl:
            # The marker belongs to the line before it
            if last_kept:
                body.append(NO_NEWLINE_MARKER)
            continue

        if origin == LineOrigin.DELETION:
            if index in selected:
                body.append(_prefixed('-', line))
                old_count += 1
                has_change = True
            elif reverse:
                last_kept = False
                continue
            else:
                body.append(_prefixed(' ', line))
                old_count += 1
                new_count += 1
        elif origin == LineOrigin.ADDITION:
            if index in selected:
                body.append(_prefixed('+', line))
                new_count += 1
                has_change = True
            elif reverse:
                body.append(_prefixed(' ', line))
                old_count += 1
                new_count += 1
            else:
                last_kept = False
                continue
        else:
            body.append(_prefixed(' ', line))
            old_count += 1
            new_count += 1
        last_kept = True

    if not has_change:
        return None

    header = format_hunk_header(hunk.old_start, old_count, hunk.new_start, new_count)
    return [header] + _place_eofnl_markers(body)


def group_selection(keys: Iterable[LineKey]) -> Dict[int, Set[int]]:
    """Group selected keys by hunk index."""
    grouped: Dict[int, Set[int]] = {}
    for hunk_index, line_index in keys:
        grouped.setdefault(hunk_index, set()).add(line_index)
    return grouped


def build_selective_patch(diff_file: DiffFile, selected: Iterable[LineKey], reverse: bool = False) -> str:
    """
    Build a patch containing only the selected addition and deletion lines.

    Each touched hunk is walked from its original start positions with fresh
    old/new counts, and a new header is written for it. Hunks in which no
    selected change survives are left out. Selected context lines contribute
    nothing.

    Args:
        diff_file: The DiffFile the selection was made on
        selected: Keys of the selected lines
        reverse: Build for reverse application (unstaging from the index)

    Returns:
        The patch text ending with a newline, or an empty string if the
        selection contains no changes

    Raises:
        StaleSelectionError: If a key does not exist in ``diff_file``
    """
    keys = list(selected)
    validate_selection(diff_file, keys)

    grouped = group_selection(keys)
    hunk_blocks: List[str] = []
    for hunk_index in sorted(grouped):
        block = _build_partial_hunk(diff_file.hunks[hunk_index], grouped[hunk_index], reverse)
        if block is not None:
            hunk_blocks.extend(block)

    if not hunk_blocks:
        logger.debug(f"Selection on {diff_file.path} produced no changes; returning empty patch")
        return ''

    lines = build_file_header(diff_file.path, diff_file.status) + hunk_blocks
    logger.debug(f"Built selective patch for {diff_file.path} from {len(keys)} selected line(s) "
                 f"across {len(grouped)} hunk(s)")
    return '\n'.join(lines) + '\n'
