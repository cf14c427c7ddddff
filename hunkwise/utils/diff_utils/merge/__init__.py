"""
Three-way merge fallback and conflict resolution.
"""

from .merge_resolver import perform_auto_merge, resolve_conflict, resolve_all_conflicts
from .merge_resolver import resolve_output_conflict, resolve_region_lines, accept_side
from .merge_resolver import compute_line_origins, line_count, diff_count
