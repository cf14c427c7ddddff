"""
Pixel-level comparison of two RGBA rasters.

Both inputs are flat RGBA byte buffers of the same canvas size. Every pixel is
classified as added, removed, changed or unchanged. A pixel whose alpha is
below the alpha threshold is treated as fully transparent and its colour is
ignored; two opaque pixels are "changed" when the summed absolute difference
of their four channels exceeds the colour threshold.

The work is split into fixed-size slices of whole pixels so that the async
variant can hand control back to the event loop between slices.
"""

import asyncio
from typing import Callable, Optional

from hunkwise.utils.logging_utils import logger
from ..core.config import (
    ADDED_COLOR,
    CHANGED_COLOR,
    HIGHLIGHT_ALPHA,
    REMOVED_COLOR,
    UNCHANGED_DIM_FACTOR,
    clamp_color_threshold,
    get_alpha_threshold,
    get_chunk_pixels,
    get_color_threshold,
)
from ..core.exceptions import ImageDiffError
from ..core.models import ImageDiffResult, PixelClass, PixelCounts

BYTES_PER_PIXEL = 4


def classify_pixel(old_rgba, new_rgba, color_threshold: int, alpha_threshold: int) -> PixelClass:
    """
    Classify one pixel pair.

    Args:
        old_rgba: (r, g, b, a) of the old pixel
        new_rgba: (r, g, b, a) of the new pixel
        color_threshold: Largest channel distance still counted as unchanged
        alpha_threshold: Alpha below which a pixel counts as transparent

    Returns:
        The PixelClass of the pair
    """
    old_transparent = old_rgba[3] < alpha_threshold
    new_transparent = new_rgba[3] < alpha_threshold

    if old_transparent and new_transparent:
        return PixelClass.UNCHANGED
    if old_transparent:
        return PixelClass.ADDED
    if new_transparent:
        return PixelClass.REMOVED

    distance = (abs(old_rgba[0] - new_rgba[0]) + abs(old_rgba[1] - new_rgba[1])
                + abs(old_rgba[2] - new_rgba[2]) + abs(old_rgba[3] - new_rgba[3]))
    return PixelClass.CHANGED if distance > color_threshold else PixelClass.UNCHANGED


class ImageDiffComputation:
    """
    One comparison of two canvases, advanced a slice at a time.

    Each instance owns its output buffer and counters, so several
    computations can run side by side without sharing state.
    """

    def __init__(self, old_pixels, new_pixels, width: int, height: int,
                 color_threshold: Optional[int] = None,
                 alpha_threshold: Optional[int] = None,
                 chunk_pixels: Optional[int] = None):
        expected = width * height * BYTES_PER_PIXEL
        if width < 0 or height < 0:
            raise ImageDiffError(f"Invalid canvas size {width}x{height}",
                                 details={"width": width, "height": height})
        if len(old_pixels) != expected or len(new_pixels) != expected:
            raise ImageDiffError(
                f"Pixel buffers must be {expected} bytes for a {width}x{height} canvas, "
                f"got {len(old_pixels)} and {len(new_pixels)}",
                details={"expected": expected, "old": len(old_pixels), "new": len(new_pixels)},
            )

        self.old_pixels = old_pixels
        self.new_pixels = new_pixels
        self.width = width
        self.height = height
        self.color_threshold = clamp_color_threshold(
            get_color_threshold() if color_threshold is None else color_threshold)
        self.alpha_threshold = get_alpha_threshold() if alpha_threshold is None else alpha_threshold
        self.chunk_pixels = chunk_pixels if chunk_pixels and chunk_pixels > 0 else get_chunk_pixels()

        self.total_pixels = width * height
        self.position = 0
        self.counts = PixelCounts()
        self.output = bytearray(expected)

    @property
    def done(self) -> bool:
        return self.position >= self.total_pixels

    def step(self) -> int:
        """
        Process the next slice of pixels.

        Returns:
            Number of pixels processed in this slice (0 once done)
        """
        start = self.position
        end = min(start + self.chunk_pixels, self.total_pixels)
        old = self.old_pixels
        new = self.new_pixels
        out = self.output
        counts = self.counts
        color_threshold = self.color_threshold
        alpha_threshold = self.alpha_threshold

        for offset in range(start * BYTES_PER_PIXEL, end * BYTES_PER_PIXEL, BYTES_PER_PIXEL):
            old_px = old[offset:offset + BYTES_PER_PIXEL]
            new_px = new[offset:offset + BYTES_PER_PIXEL]
            pixel_class = classify_pixel(old_px, new_px, color_threshold, alpha_threshold)

            if pixel_class == PixelClass.ADDED:
                counts.added += 1
                out[offset:offset + BYTES_PER_PIXEL] = bytes((*ADDED_COLOR, HIGHLIGHT_ALPHA))
            elif pixel_class == PixelClass.REMOVED:
                counts.removed += 1
                out[offset:offset + BYTES_PER_PIXEL] = bytes((*REMOVED_COLOR, HIGHLIGHT_ALPHA))
            elif pixel_class == PixelClass.CHANGED:
                counts.changed += 1
                out[offset:offset + BYTES_PER_PIXEL] = bytes((*CHANGED_COLOR, HIGHLIGHT_ALPHA))
            else:
                counts.unchanged += 1
                out[offset:offset + 3] = new_px[:3]
                out[offset + 3] = int(new_px[3] * UNCHANGED_DIM_FACTOR)

        self.position = end
        return end - start

    def result(self) -> ImageDiffResult:
        if not self.done:
            raise ImageDiffError("Image comparison has not finished",
                                 details={"position": self.position, "total": self.total_pixels})
        return ImageDiffResult(
            width=self.width,
            height=self.height,
            counts=self.counts,
            pixels=self.output,
            color_threshold=self.color_threshold,
            alpha_threshold=self.alpha_threshold,
        )


def compute_image_diff(old_pixels, new_pixels, width: int, height: int,
                       color_threshold: Optional[int] = None,
                       alpha_threshold: Optional[int] = None,
                       chunk_pixels: Optional[int] = None) -> ImageDiffResult:
    """
    Compare two canvases in one go.

    Args:
        old_pixels: RGBA bytes of the old image, ``width*height*4`` long
        new_pixels: RGBA bytes of the new image, same length
        width: Canvas width
        height: Canvas height
        color_threshold: Channel distance threshold (0-100); configured default if None
        alpha_threshold: Transparency threshold; configured default if None
        chunk_pixels: Slice size; configured default if None

    Returns:
        The ImageDiffResult with the highlight raster and pixel counts
    """
    computation = ImageDiffComputation(old_pixels, new_pixels, width, height,
                                       color_threshold, alpha_threshold, chunk_pixels)
    while not computation.done:
        computation.step()
    return computation.result()


async def compute_image_diff_async(old_pixels, new_pixels, width: int, height: int,
                                   color_threshold: Optional[int] = None,
                                   alpha_threshold: Optional[int] = None,
                                   chunk_pixels: Optional[int] = None,
                                   is_current: Optional[Callable[[], bool]] = None) -> Optional[ImageDiffResult]:
    """
    Compare two canvases, yielding to the event loop after every slice.

    Args:
        is_current: Checked between slices; when it returns False the
            computation stops and None is returned
        Other arguments as for ``compute_image_diff``

    Returns:
        The ImageDiffResult, or None if the computation was superseded
    """
    computation = ImageDiffComputation(old_pixels, new_pixels, width, height,
                                       color_threshold, alpha_threshold, chunk_pixels)
    slices = 0
    while not computation.done:
        if is_current is not None and not is_current():
            logger.debug(f"Image diff superseded after {computation.position}/{computation.total_pixels} pixels")
            return None
        computation.step()
        slices += 1
        await asyncio.sleep(0)

    logger.debug(f"Image diff of {width}x{height} finished in {slices} slice(s): {computation.counts}")
    return computation.result()
