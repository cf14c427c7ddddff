"""
diff_utils package - Diff display, staging and merge engine.

This package provides word and whitespace highlighting of changed lines,
selective staging patches, conflict parsing and resolution, and pixel-level
image comparison. It is designed to be modular and maintainable, with clear
separation of concerns.
"""

# Core utilities
from .core import DiffEngineError, PatchApplicationError, StaleSelectionError
from .core import ConflictResolutionError, ImageDiffError, BackendError
from .core import DiffLine, DiffHunk, DiffFile, LineKey, LineOrigin, FileStatus, ResolutionChoice

# Parsing utilities
from .parsing import parse_unified_diff, split_combined_diff, extract_target_file_from_diff
from .parsing import parse_conflict_regions, parse_output_segments, count_unresolved

# Inline highlighting
from .inline import compute_word_diff, compute_inline_whitespace_diff, is_whitespace_only_change
from .inline import convert_to_split_lines, DiffFileCache

# Validation utilities
from .validation import validate_selection, validate_patch_headers, LineSelection

# Patch building
from .patch import build_hunk_patch, build_selective_patch

# Merge resolution
from .merge import perform_auto_merge, resolve_conflict, resolve_all_conflicts, resolve_output_conflict

# Image comparison
from .image import compute_image_diff, compute_image_diff_async, ImageDiffSession, load_canvas_pair

# Application utilities
from .application import DiffBackend, GitCliBackend, PatchDirection
from .application import stage_hunk, unstage_hunk, stage_lines, unstage_lines
from .application import load_merge_output, mark_resolved
