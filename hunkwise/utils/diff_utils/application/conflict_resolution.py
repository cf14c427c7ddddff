"""
Conflict resolution workflows on top of a DiffBackend.
"""

from dataclasses import dataclass
from typing import List, Union

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import BackendError, ConflictResolutionError
from ..core.models import ConflictRegion, ResolutionChoice
from ..merge.merge_resolver import perform_auto_merge, resolve_conflict
from ..parsing.conflict_parser import count_unresolved, parse_conflict_regions
from .backend import DiffBackend


@dataclass
class MergeOutput:
    """Initial text of the merge editor and where it came from."""
    text: str
    from_backend: bool


@dataclass
class ResolutionResult:
    """Outcome of marking a conflicted file resolved."""
    path: str
    submitted: bool
    unresolved_count: int = 0


def load_merge_output(backend: DiffBackend, path: str, base: str, ours: str, theirs: str) -> MergeOutput:
    """
    Load the text the merge editor starts from.

    The working tree file written by the merge is preferred since it carries
    real diff3 markers. When it cannot be read or is empty, the positional
    auto-merge of the three versions is used instead.
    """
    try:
        text = backend.read_file(path)
    except BackendError as e:
        logger.debug(f"Could not read merge result for {path}, falling back to auto-merge: {e.message}")
        text = ''

    if text:
        return MergeOutput(text=text, from_backend=True)

    logger.info(f"Using positional auto-merge for {path}")
    return MergeOutput(text=perform_auto_merge(base, ours, theirs), from_backend=False)


def mark_resolved(backend: DiffBackend, path: str, output: str,
                  allow_unresolved: bool = False) -> ResolutionResult:
    """
    Submit the merge output as the resolved content of a file.

    Args:
        backend: Backend to submit through
        path: Conflicted file
        output: Final merge editor text
        allow_unresolved: Submit even if conflict markers remain

    Returns:
        ResolutionResult; ``submitted`` is False when conflicts remain and
        ``allow_unresolved`` is not set
    """
    unresolved = count_unresolved(output)
    if unresolved and not allow_unresolved:
        logger.info(f"{path} still has {unresolved} unresolved conflict(s); not submitting")
        return ResolutionResult(path=path, submitted=False, unresolved_count=unresolved)

    backend.resolve_conflict(path, output)
    logger.info(f"Marked {path} resolved")
    return ResolutionResult(path=path, submitted=True, unresolved_count=unresolved)


def resolve_region_in_file(backend: DiffBackend, path: str, region_index: int,
                           choice: Union[ResolutionChoice, str]) -> List[ConflictRegion]:
    """
    Resolve one region of a conflicted working tree file in place.

    Returns:
        The regions still left in the file, re-indexed from zero

    Raises:
        ConflictResolutionError: If the region does not exist
        BackendError: If the file cannot be read or written
    """
    text = backend.read_file(path)
    try:
        resolved = resolve_conflict(text, region_index, choice)
    except ConflictResolutionError:
        logger.warning(f"Conflict {region_index} not found in {path}")
        raise

    backend.write_file(path, resolved)
    return parse_conflict_regions(resolved)
