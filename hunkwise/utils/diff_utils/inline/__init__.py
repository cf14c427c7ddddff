"""
Inline highlighting of changed lines.
"""

from .word_diff import compute_word_diff, pair_changed_lines, tokenize
from .whitespace_diff import is_whitespace_only_change, compute_inline_whitespace_diff
from .whitespace_diff import find_whitespace_only_pairs
from .split_view import convert_to_split_lines
from .cache import DiffFileCache
