"""
Validation of line selections and of generated patch text.
"""

from typing import FrozenSet, Iterable, List, Optional

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import StaleSelectionError
from ..core.models import DiffFile, LineKey
from ..core.utils import format_hunk_header, parse_hunk_header


def validate_selection(diff_file: DiffFile, keys: Iterable[LineKey]) -> None:
    """
    Check that every selected key points at a line of this DiffFile.

    Keys are positional, so a selection taken from a previous load of the same
    file can silently point at different lines. Such keys are rejected rather
    than dropped.

    Args:
        diff_file: The DiffFile the selection is applied to
        keys: Selected line keys

    Raises:
        StaleSelectionError: If any key is out of range
    """
    stale = []
    for key in keys:
        hunk_index, line_index = key
        if not 0 <= hunk_index < len(diff_file.hunks):
            stale.append(key)
        elif not 0 <= line_index < len(diff_file.hunks[hunk_index].lines):
            stale.append(key)

    if stale:
        logger.debug(f"Rejecting stale selection for {diff_file.path}: {stale}")
        raise StaleSelectionError(
            f"Selection references {len(stale)} line(s) that are not in the current diff of {diff_file.path}",
            details={"path": diff_file.path, "stale_keys": [tuple(key) for key in stale]},
        )


def validate_patch_headers(patch_text: str) -> List[str]:
    """
    Recount every hunk body in a patch and compare it with its header.

    Args:
        patch_text: Unified diff text

    Returns:
        A description of every mismatching hunk; empty if all headers agree
    """
    problems: List[str] = []
    header: Optional[str] = None
    old_count = new_count = 0

    def check():
        if header is None:
            return
        numbers = parse_hunk_header(header)
        if numbers is None:
            problems.append(f"Unparseable hunk header: {header}")
            return
        old_start, expected_old, new_start, expected_new = numbers
        if (expected_old, expected_new) != (old_count, new_count):
            problems.append(
                f"{header} does not match body, expected "
                f"{format_hunk_header(old_start, old_count, new_start, new_count)}"
            )

    for line in patch_text.split('\n'):
        if line.startswith('@@'):
            check()
            header = line
            old_count = new_count = 0
        elif header is None or line.startswith('\\'):
            continue
        elif line.startswith(' '):
            old_count += 1
            new_count += 1
        elif line.startswith('-'):
            old_count += 1
        elif line.startswith('+'):
            new_count += 1
    check()

    return problems


class LineSelection:
    """
    Immutable set of selected diff lines.

    Every operation returns a new selection, so a view can keep the previous
    value for undo or compare before and after.
    """

    def __init__(self, keys: Iterable[LineKey] = ()):
        self._keys: FrozenSet[LineKey] = frozenset(LineKey(*key) for key in keys)

    def __contains__(self, key) -> bool:
        return LineKey(*key) in self._keys

    def __iter__(self):
        return iter(sorted(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other) -> bool:
        return isinstance(other, LineSelection) and self._keys == other._keys

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return f"LineSelection({sorted(self._keys)!r})"

    @property
    def keys(self) -> FrozenSet[LineKey]:
        return self._keys

    def toggle(self, key: LineKey) -> "LineSelection":
        key = LineKey(*key)
        if key in self._keys:
            return LineSelection(self._keys - {key})
        return LineSelection(self._keys | {key})

    def clear(self) -> "LineSelection":
        return LineSelection()

    def for_hunk(self, hunk_index: int) -> FrozenSet[int]:
        """Line indices selected within one hunk."""
        return frozenset(key.line_index for key in self._keys if key.hunk_index == hunk_index)

    def select_hunk(self, diff_file: DiffFile, hunk_index: int) -> "LineSelection":
        """Add every changed line of a hunk."""
        hunk = diff_file.hunks[hunk_index]
        added = {LineKey(hunk_index, i) for i, line in enumerate(hunk.lines) if line.is_change}
        return LineSelection(self._keys | added)

    def select_range(self, diff_file: DiffFile, anchor: LineKey, target: LineKey) -> "LineSelection":
        """
        Add the changed lines between an anchor and a target line, inclusive.

        Both keys must be in the same hunk; a range spanning hunks only selects
        the target line.
        """
        anchor, target = LineKey(*anchor), LineKey(*target)
        if anchor.hunk_index != target.hunk_index:
            return LineSelection(self._keys | {target})

        hunk = diff_file.hunks[target.hunk_index]
        low, high = sorted((anchor.line_index, target.line_index))
        added = {
            LineKey(target.hunk_index, i)
            for i in range(low, min(high, len(hunk.lines) - 1) + 1)
            if hunk.lines[i].is_change
        }
        return LineSelection(self._keys | added)
