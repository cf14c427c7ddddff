"""
Application utilities for the diff_utils package.

This module provides the backend interface and the workflows that submit
patches and resolved files through it.
"""

from .backend import DiffBackend, PatchDirection, Revision, ImageBytes
from .git_apply import GitCliBackend
from .staging import StagingResult, stage_hunk, unstage_hunk, stage_lines, unstage_lines
from .conflict_resolution import MergeOutput, ResolutionResult
from .conflict_resolution import load_merge_output, mark_resolved, resolve_region_in_file
