"""
Staging and unstaging of hunks and individual lines.

Each operation builds a patch from the DiffFile currently on screen and hands
it to the backend. The result is returned as a value for the caller to act
on (refresh status, reload the diff); nothing is retried. A rejected patch
usually means the file changed underneath the view, and the right response
is to reload and recompute.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import PatchApplicationError
from ..core.models import DiffFile, LineKey
from ..patch.patch_builder import build_hunk_patch, build_selective_patch
from .backend import DiffBackend, PatchDirection

EMPTY_PATCH = "empty-patch"


@dataclass
class StagingResult:
    """Outcome of a staging operation."""
    path: str
    direction: PatchDirection
    applied: bool
    patch: str = ''
    reason: Optional[str] = None

    @property
    def status_changed(self) -> bool:
        """Whether the index changed and file status should be refreshed."""
        return self.applied


def _submit(backend: DiffBackend, diff_file: DiffFile, patch: str, direction: PatchDirection) -> StagingResult:
    if not patch:
        logger.debug(f"Nothing to {direction.value} for {diff_file.path}")
        return StagingResult(diff_file.path, direction, applied=False, reason=EMPTY_PATCH)

    try:
        backend.apply_patch(patch, direction)
    except PatchApplicationError as e:
        logger.warning(f"Failed to {direction.value} changes in {diff_file.path}: {e.message}")
        raise

    logger.info(f"{direction.value.capitalize()}d changes in {diff_file.path}")
    return StagingResult(diff_file.path, direction, applied=True, patch=patch)


def stage_hunk(backend: DiffBackend, diff_file: DiffFile, hunk_index: int) -> StagingResult:
    """Stage one whole hunk of an unstaged diff."""
    return _submit(backend, diff_file, build_hunk_patch(diff_file, hunk_index), PatchDirection.STAGE)


def unstage_hunk(backend: DiffBackend, diff_file: DiffFile, hunk_index: int) -> StagingResult:
    """Unstage one whole hunk of a staged diff."""
    return _submit(backend, diff_file, build_hunk_patch(diff_file, hunk_index), PatchDirection.UNSTAGE)


def stage_lines(backend: DiffBackend, diff_file: DiffFile, selected: Iterable[LineKey]) -> StagingResult:
    """Stage the selected lines of an unstaged diff."""
    patch = build_selective_patch(diff_file, selected)
    return _submit(backend, diff_file, patch, PatchDirection.STAGE)


def unstage_lines(backend: DiffBackend, diff_file: DiffFile, selected: Iterable[LineKey]) -> StagingResult:
    """Unstage the selected lines of a staged diff."""
    patch = build_selective_patch(diff_file, selected, reverse=True)
    return _submit(backend, diff_file, patch, PatchDirection.UNSTAGE)
