"""
Value objects shared by every part of the diff engine.

Hunks, lines and conflict regions are plain immutable data. Engine functions
take them as input and return new values; nothing here holds behaviour beyond
small derived properties.
"""

import enum
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple


class LineOrigin(enum.Enum):
    """Per-line diff classification as reported by the backend."""
    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT_EOFNL = "context-eofnl"
    ADD_EOFNL = "add-eofnl"
    DEL_EOFNL = "del-eofnl"
    FILE_HEADER = "file-header"
    HUNK_HEADER = "hunk-header"
    BINARY = "binary"

    @property
    def is_change(self) -> bool:
        return self in (LineOrigin.ADDITION, LineOrigin.DELETION)

    @property
    def is_eofnl(self) -> bool:
        return self in (LineOrigin.CONTEXT_EOFNL, LineOrigin.ADD_EOFNL, LineOrigin.DEL_EOFNL)

    @property
    def is_metadata(self) -> bool:
        return self in (LineOrigin.FILE_HEADER, LineOrigin.HUNK_HEADER, LineOrigin.BINARY)


class FileStatus(enum.Enum):
    """Status of a file in the working tree or a commit."""
    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    CONFLICTED = "conflicted"
    UNTRACKED = "untracked"


class ResolutionChoice(enum.Enum):
    """Which side of a conflict to keep."""
    OURS = "ours"
    THEIRS = "theirs"
    BOTH = "both"


class SegmentType(enum.Enum):
    """Classification of an inline whitespace diff segment."""
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class PixelClass(enum.Enum):
    """Classification of a single pixel in an image comparison."""
    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffLine:
    """A single line in a diff hunk."""
    content: str
    origin: LineOrigin
    old_line_no: Optional[int] = None
    new_line_no: Optional[int] = None

    @property
    def is_change(self) -> bool:
        return self.origin.is_change


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of a diff sharing one ``@@`` header."""
    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: Tuple[DiffLine, ...] = ()


@dataclass(frozen=True)
class DiffFile:
    """Diff for a single file. Replaced wholesale whenever it is reloaded."""
    path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: Tuple[DiffHunk, ...] = ()
    old_path: Optional[str] = None
    is_binary: bool = False
    is_image: bool = False
    additions: int = 0
    deletions: int = 0


class LineKey(NamedTuple):
    """
    Identity of one diff line within a specific DiffFile instance.

    A key is positional: it is only meaningful against the DiffFile it was
    taken from.
    """
    hunk_index: int
    line_index: int


@dataclass(frozen=True)
class ConflictRegion:
    """
    One ``<<<<<<<`` ... ``>>>>>>>`` block in a conflicted file.

    ``start_line`` and ``end_line`` are the 0-based indices of the opening and
    closing marker lines. The ours/theirs spans are half-open: ``ours_start``
    is the first line after the opening marker and ``ours_end`` is the
    separator line; ``theirs_start`` follows the separator and ``theirs_end``
    is the closing marker line.
    """
    index: int
    start_line: int
    end_line: int
    ours_start: int
    ours_end: int
    theirs_start: int
    theirs_end: int
    ours_lines: Tuple[str, ...] = ()
    theirs_lines: Tuple[str, ...] = ()
    base_lines: Optional[Tuple[str, ...]] = None

    @property
    def ours_content(self) -> str:
        return "\n".join(self.ours_lines)

    @property
    def theirs_content(self) -> str:
        return "\n".join(self.theirs_lines)


@dataclass(frozen=True)
class ResolvedSegment:
    """A run of merge output lines that carry no conflict markers."""
    lines: Tuple[str, ...]

    kind = "resolved"


@dataclass(frozen=True)
class ConflictSegment:
    """An unresolved conflict in the merge output, with its marker labels."""
    ours_lines: Tuple[str, ...]
    theirs_lines: Tuple[str, ...]
    ours_label: str
    theirs_label: str
    base_lines: Optional[Tuple[str, ...]] = None
    base_label: str = ""

    kind = "conflict"

    def to_marker_lines(self) -> List[str]:
        """Re-emit the conflict with its original labels."""
        lines = [f"<<<<<<< {self.ours_label}"] + list(self.ours_lines)
        if self.base_lines is not None:
            lines.append(f"||||||| {self.base_label}" if self.base_label else "|||||||")
            lines.extend(self.base_lines)
        lines.append("=======")
        lines.extend(self.theirs_lines)
        lines.append(f">>>>>>> {self.theirs_label}")
        return lines

    @property
    def marker_line_count(self) -> int:
        """Number of output lines this conflict occupies with its markers."""
        base = 0 if self.base_lines is None else len(self.base_lines) + 1
        return len(self.ours_lines) + len(self.theirs_lines) + base + 3


@dataclass(frozen=True)
class WordSegment:
    """A run of tokens that share the same changed flag."""
    text: str
    changed: bool


@dataclass(frozen=True)
class WordDiffResult:
    """Word-level diff of one old line against one new line."""
    old_segments: Tuple[WordSegment, ...] = ()
    new_segments: Tuple[WordSegment, ...] = ()


@dataclass(frozen=True)
class InlineDiffSegment:
    """A run of characters in a whitespace-only inline diff."""
    text: str
    type: SegmentType


@dataclass(frozen=True)
class SplitLine:
    """One row of the side-by-side view; either side may be empty."""
    left: Optional[DiffLine]
    right: Optional[DiffLine]


@dataclass
class PixelCounts:
    """Running totals of pixel classifications."""
    added: int = 0
    removed: int = 0
    changed: int = 0
    unchanged: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.changed + self.unchanged

    def percentages(self) -> dict:
        """Return each category as a percentage of the total."""
        total = self.total
        if total == 0:
            return {name: 0.0 for name in ("added", "removed", "changed", "unchanged")}
        return {
            "added": self.added / total * 100,
            "removed": self.removed / total * 100,
            "changed": self.changed / total * 100,
            "unchanged": self.unchanged / total * 100,
        }

    def add(self, other: "PixelCounts") -> None:
        self.added += other.added
        self.removed += other.removed
        self.changed += other.changed
        self.unchanged += other.unchanged


@dataclass
class ImageDiffResult:
    """Result of comparing two equally sized RGBA canvases."""
    width: int
    height: int
    counts: PixelCounts = field(default_factory=PixelCounts)
    pixels: bytearray = field(default_factory=bytearray, repr=False)
    color_threshold: int = 0
    alpha_threshold: int = 0

    @property
    def total(self) -> int:
        return self.width * self.height

    @property
    def is_identical(self) -> bool:
        return self.counts.unchanged == self.total
