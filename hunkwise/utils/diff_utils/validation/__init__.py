"""
Validation utilities for the diff_utils package.

This module provides functionality for checking line selections and generated patches.
"""

from .validators import validate_selection, validate_patch_headers, LineSelection
