"""
Debounced, generation-guarded image comparison for one view.

Each request bumps a generation counter. A request waits out the debounce
delay, then runs the chunked comparison; between slices, and again before
publishing, it checks that its generation is still the newest. An outdated
computation simply stops and its result is dropped, so a slow older result
can never replace a newer one.
"""

import asyncio
from typing import Callable, Optional

from hunkwise.utils.logging_utils import logger
from ..core.config import get_debounce_seconds
from ..core.models import ImageDiffResult
from .image_diff import compute_image_diff_async


class ImageDiffSession:
    """Holds the two canvases of a view and the latest comparison result."""

    def __init__(self, old_pixels, new_pixels, width: int, height: int,
                 alpha_threshold: Optional[int] = None,
                 debounce_seconds: Optional[float] = None,
                 chunk_pixels: Optional[int] = None,
                 on_result: Optional[Callable[[ImageDiffResult], None]] = None):
        self._old_pixels = old_pixels
        self._new_pixels = new_pixels
        self._width = width
        self._height = height
        self._alpha_threshold = alpha_threshold
        self._debounce = get_debounce_seconds() if debounce_seconds is None else debounce_seconds
        self._chunk_pixels = chunk_pixels
        self._on_result = on_result
        self._generation = 0
        self._latest_task: Optional[asyncio.Task] = None
        self.result: Optional[ImageDiffResult] = None

    @property
    def generation(self) -> int:
        return self._generation

    def set_images(self, old_pixels, new_pixels, width: int, height: int) -> None:
        """Swap in new canvases; any computation still running becomes outdated."""
        self._old_pixels = old_pixels
        self._new_pixels = new_pixels
        self._width = width
        self._height = height
        self._generation += 1
        self.result = None

    def request(self, color_threshold: int) -> "asyncio.Task":
        """
        Schedule a comparison with the given colour threshold.

        Must be called from a running event loop.

        Returns:
            Task resolving to the result, or None if a newer request superseded it
        """
        self._generation += 1
        generation = self._generation
        self._latest_task = asyncio.ensure_future(self._run(generation, color_threshold))
        return self._latest_task

    async def wait(self) -> Optional[ImageDiffResult]:
        """Wait for the most recent request and return the published result."""
        if self._latest_task is not None:
            await self._latest_task
        return self.result

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(self, generation: int, color_threshold: int) -> Optional[ImageDiffResult]:
        if self._debounce > 0:
            await asyncio.sleep(self._debounce)
        if not self._is_current(generation):
            logger.debug(f"Image diff request {generation} superseded during debounce")
            return None

        result = await compute_image_diff_async(
            self._old_pixels, self._new_pixels, self._width, self._height,
            color_threshold=color_threshold,
            alpha_threshold=self._alpha_threshold,
            chunk_pixels=self._chunk_pixels,
            is_current=lambda: self._is_current(generation),
        )

        if result is None or not self._is_current(generation):
            logger.debug(f"Discarding outdated image diff result {generation}")
            return None

        self.result = result
        if self._on_result is not None:
            self._on_result(result)
        return result
