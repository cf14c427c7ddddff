"""
Core types, configuration and helpers shared by the diff engine.
"""

from .exceptions import (
    DiffEngineError,
    BackendError,
    PatchApplicationError,
    StaleSelectionError,
    ConflictResolutionError,
    ImageDiffError,
)
from .models import (
    LineOrigin, FileStatus, ResolutionChoice, SegmentType, PixelClass,
    DiffLine, DiffHunk, DiffFile, LineKey,
    ConflictRegion, ResolvedSegment, ConflictSegment,
    WordSegment, WordDiffResult, InlineDiffSegment, SplitLine,
    PixelCounts, ImageDiffResult,
)
from .utils import clamp, format_hunk_header, parse_hunk_header
