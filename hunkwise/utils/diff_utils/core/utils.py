"""
Utility functions for the diff_utils package.
"""

import re
from typing import Optional, Tuple

HUNK_HEADER_PATTERN = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$')


def clamp(value, min_value, max_value):
    """
    Clamp a value between a minimum and maximum.

    Args:
        value: The value to clamp
        min_value: The minimum allowed value
        max_value: The maximum allowed value

    Returns:
        The clamped value
    """
    return max(min_value, min(value, max_value))


def format_hunk_header(old_start: int, old_count: int, new_start: int, new_count: int) -> str:
    """Format a unified diff hunk header with explicit counts."""
    return f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"


def parse_hunk_header(header: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Parse the numbers out of a hunk header.

    Counts omitted in the short ``@@ -a +c @@`` form default to 1.

    Args:
        header: A line starting with ``@@``

    Returns:
        (old_start, old_count, new_start, new_count), or None if the line is
        not a hunk header
    """
    match = HUNK_HEADER_PATTERN.match(header.strip())
    if not match:
        return None
    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) is not None else 1
    return old_start, old_count, new_start, new_count


def strip_line_ending(content: str) -> str:
    """Remove a single trailing ``\\n`` from diff line content."""
    # A trailing \r is kept so lines of CRLF files still match the index
    return content[:-1] if content.endswith('\n') else content
