"""
Configuration settings for the diff engine.

This module provides centralized configuration for the inline diff, patch,
merge and image comparison parameters. Every value can be overridden through
an environment variable so the host application can tune the engine without
code changes.
"""

import os

from .utils import clamp

# Image comparison settings
DEFAULT_ALPHA_THRESHOLD = 10      # Pixels with alpha below this count as fully transparent
DEFAULT_COLOR_THRESHOLD = 10      # Summed channel distance above which a pixel is "changed"
MIN_COLOR_THRESHOLD = 0
MAX_COLOR_THRESHOLD = 100
DEFAULT_CHUNK_PIXELS = 65536      # Pixels processed per slice before yielding
DEFAULT_DEBOUNCE_MS = 150         # Delay before a threshold change triggers a recompute
HIGHLIGHT_ALPHA = 200             # Alpha used for added/removed/changed highlight pixels
UNCHANGED_DIM_FACTOR = 0.3        # Unchanged pixels keep this share of the new image's alpha

# Highlight colours (RGB)
ADDED_COLOR = (0, 255, 0)
REMOVED_COLOR = (255, 0, 0)
CHANGED_COLOR = (255, 0, 255)

# Extensions treated as raster images when a diff is loaded
IMAGE_EXTENSIONS = frozenset({'.png', '.jpg', '.jpeg', '.gif', '.bmp', '.webp', '.ico', '.tif', '.tiff'})

# Word diff settings
DEFAULT_WORD_DIFF_MAX_CELLS = 250000  # Largest token-count product the LCS table may reach

# Conflict marker settings
MARKER_OURS = "<<<<<<<"
MARKER_BASE = "|||||||"
MARKER_SEPARATOR = "======="
MARKER_THEIRS = ">>>>>>>"
DEFAULT_OURS_LABEL = "OURS"
DEFAULT_THEIRS_LABEL = "THEIRS"

# Environment variable names for configuration overrides
ENV_PREFIX = "HUNKWISE_DIFF_"
ENV_ALPHA_THRESHOLD = f"{ENV_PREFIX}ALPHA_THRESHOLD"
ENV_COLOR_THRESHOLD = f"{ENV_PREFIX}COLOR_THRESHOLD"
ENV_CHUNK_PIXELS = f"{ENV_PREFIX}CHUNK_PIXELS"
ENV_DEBOUNCE_MS = f"{ENV_PREFIX}DEBOUNCE_MS"
ENV_WORD_DIFF_MAX_CELLS = f"{ENV_PREFIX}WORD_DIFF_MAX_CELLS"


def get_config_value(env_var: str, default_value):
    """
    Get a configuration value from environment variable or use default.

    Args:
        env_var: The environment variable name
        default_value: The default value to use if env var is not set

    Returns:
        The configuration value
    """
    value = os.environ.get(env_var)
    if value is None:
        return default_value

    # Try to convert to the same type as default_value
    try:
        if isinstance(default_value, bool):
            return value.lower() in ('true', 'yes', '1', 'y')
        elif isinstance(default_value, int):
            return int(value)
        elif isinstance(default_value, float):
            return float(value)
        else:
            return value
    except (ValueError, TypeError):
        return default_value


def clamp_color_threshold(threshold: int) -> int:
    """Clamp a colour threshold into the supported 0-100 range."""
    return clamp(int(threshold), MIN_COLOR_THRESHOLD, MAX_COLOR_THRESHOLD)


def get_alpha_threshold() -> int:
    """Get the configured alpha transparency threshold."""
    return get_config_value(ENV_ALPHA_THRESHOLD, DEFAULT_ALPHA_THRESHOLD)


def get_color_threshold() -> int:
    """Get the configured default colour-distance threshold."""
    return clamp_color_threshold(get_config_value(ENV_COLOR_THRESHOLD, DEFAULT_COLOR_THRESHOLD))


def get_chunk_pixels() -> int:
    """Get the number of pixels processed per cooperative slice."""
    chunk = get_config_value(ENV_CHUNK_PIXELS, DEFAULT_CHUNK_PIXELS)
    return chunk if chunk > 0 else DEFAULT_CHUNK_PIXELS


def get_debounce_seconds() -> float:
    """Get the image diff debounce delay in seconds."""
    return max(0, get_config_value(ENV_DEBOUNCE_MS, DEFAULT_DEBOUNCE_MS)) / 1000.0


def get_word_diff_max_cells() -> int:
    """Get the upper bound on the word diff LCS table size."""
    return get_config_value(ENV_WORD_DIFF_MAX_CELLS, DEFAULT_WORD_DIFF_MAX_CELLS)
