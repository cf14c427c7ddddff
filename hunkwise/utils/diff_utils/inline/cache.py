"""
Memoization of inline diff results for one loaded DiffFile.

The cache is owned by whoever displays the diff. It is keyed by hunk index and
line index, so it is only valid for the DiffFile it was built for; binding a
different DiffFile drops every entry.
"""

from typing import Dict, Optional, Tuple

from hunkwise.utils.logging_utils import logger
from ..core.models import DiffFile, DiffHunk, LineKey, WordDiffResult
from .whitespace_diff import find_whitespace_only_pairs
from .word_diff import compute_word_diff, pair_changed_lines


class DiffFileCache:
    """Per-DiffFile cache of line pairings and word diffs."""

    def __init__(self, diff_file: Optional[DiffFile] = None):
        self._diff_file = diff_file
        self._word_pairs: Dict[int, Dict[int, int]] = {}
        self._whitespace_pairs: Dict[int, Dict[int, int]] = {}
        self._word_diffs: Dict[LineKey, Optional[WordDiffResult]] = {}

    @property
    def diff_file(self) -> Optional[DiffFile]:
        return self._diff_file

    def bind(self, diff_file: Optional[DiffFile]) -> None:
        """
        Attach the cache to a DiffFile, invalidating it if the file changed.

        Identity, not equality, decides: a reloaded diff is a new instance even
        if its content happens to be equal.
        """
        if diff_file is self._diff_file:
            return
        logger.debug("Diff file replaced, clearing inline diff cache")
        self.clear()
        self._diff_file = diff_file

    def clear(self) -> None:
        self._word_pairs.clear()
        self._whitespace_pairs.clear()
        self._word_diffs.clear()

    def __len__(self) -> int:
        return len(self._word_pairs) + len(self._whitespace_pairs) + len(self._word_diffs)

    def _hunk(self, hunk_index: int) -> DiffHunk:
        if self._diff_file is None:
            raise LookupError("No diff file is bound to this cache")
        return self._diff_file.hunks[hunk_index]

    def word_pairs(self, hunk_index: int) -> Dict[int, int]:
        """Deletion -> addition pairing used for word diff highlighting."""
        if hunk_index not in self._word_pairs:
            self._word_pairs[hunk_index] = pair_changed_lines(self._hunk(hunk_index).lines)
        return self._word_pairs[hunk_index]

    def whitespace_pairs(self, hunk_index: int) -> Dict[int, int]:
        """Deletion -> addition pairing for whitespace-only changes."""
        if hunk_index not in self._whitespace_pairs:
            self._whitespace_pairs[hunk_index] = find_whitespace_only_pairs(self._hunk(hunk_index).lines)
        return self._whitespace_pairs[hunk_index]

    def word_diff(self, hunk_index: int, deletion_index: int) -> Optional[WordDiffResult]:
        """
        Word diff of a deletion line against its paired addition.

        Returns:
            The cached WordDiffResult, or None if the deletion is unpaired
        """
        key = LineKey(hunk_index, deletion_index)
        if key in self._word_diffs:
            return self._word_diffs[key]

        result = None
        paired = self.word_pairs(hunk_index).get(deletion_index)
        if paired is not None:
            lines = self._hunk(hunk_index).lines
            result = compute_word_diff(lines[deletion_index].content, lines[paired].content)
        self._word_diffs[key] = result
        return result

    def paired_addition(self, hunk_index: int, deletion_index: int) -> Tuple[Optional[int], bool]:
        """
        Addition paired with a deletion, and whether the pair is whitespace-only.

        Whitespace-only pairs take precedence since the renderer folds them into
        a single line.
        """
        ws_pair = self.whitespace_pairs(hunk_index).get(deletion_index)
        if ws_pair is not None:
            return ws_pair, True
        return self.word_pairs(hunk_index).get(deletion_index), False
