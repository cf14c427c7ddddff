"""
Interface of the version-control backend the engine talks to.

The engine never touches the filesystem or runs processes itself; everything
goes through an implementation of DiffBackend supplied by the caller.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class PatchDirection(enum.Enum):
    """Whether a patch is applied to the index forwards or in reverse."""
    STAGE = "stage"
    UNSTAGE = "unstage"


class Revision(enum.Enum):
    """Pair of revisions to fetch image bytes for."""
    WORKING = "working"   # index -> working tree
    STAGED = "staged"     # HEAD -> index


@dataclass
class ImageBytes:
    """Encoded bytes of the old and new revision of an image."""
    old_bytes: Optional[bytes] = None
    new_bytes: Optional[bytes] = None
    format: Optional[str] = None


class DiffBackend(ABC):
    """
    Operations the engine needs from the version-control backend.
    Failures are raised as BackendError (PatchApplicationError for patches).
    """

    @abstractmethod
    def read_file(self, path: str) -> str:
        """
        Read a working tree file.

        Args:
            path: Path relative to the repository root

        Returns:
            The file content
        """
        pass

    @abstractmethod
    def write_file(self, path: str, text: str) -> None:
        """Write a working tree file."""
        pass

    @abstractmethod
    def apply_patch(self, patch_text: str, direction: PatchDirection) -> None:
        """
        Apply a patch to the index.

        Args:
            patch_text: Unified diff text produced by the patch builder
            direction: STAGE applies forwards, UNSTAGE applies in reverse
        """
        pass

    @abstractmethod
    def resolve_conflict(self, path: str, final_text: str) -> None:
        """Write the resolved content of a conflicted file and mark it resolved."""
        pass

    @abstractmethod
    def get_image_bytes(self, path: str, revision) -> ImageBytes:
        """
        Fetch both revisions of an image.

        Args:
            path: Path relative to the repository root
            revision: A Revision, or a commit id to compare with its parent
        """
        pass
