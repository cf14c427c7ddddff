"""
Pixel-level image comparison.
"""

from .image_diff import classify_pixel, compute_image_diff, compute_image_diff_async
from .image_diff import ImageDiffComputation
from .session import ImageDiffSession
from .image_loader import CanvasPair, decode_image, load_canvas_pair, render_diff_png
