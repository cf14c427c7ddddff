"""
Parsing utilities for the diff_utils package.

This module provides functionality for reading backend diff text and conflict markers.
"""

from .diff_parser import parse_unified_diff, build_hunk, is_image_path
from .diff_parser import extract_target_file_from_diff, split_combined_diff
from .conflict_parser import parse_conflict_regions, parse_output_segments, serialize_segments
from .conflict_parser import count_unresolved, has_conflict_markers
