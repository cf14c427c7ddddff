"""
Decoding of image revisions onto a shared RGBA canvas.

The canvas takes the larger width and the larger height of the two images.
Each image is pasted at the top-left; wherever an image has no pixel, the
canvas stays fully transparent black.
"""

import io
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from hunkwise.utils.logging_utils import logger
from ..core.exceptions import ImageDiffError
from ..core.models import ImageDiffResult


@dataclass
class CanvasPair:
    """Two RGBA buffers laid out on the same canvas."""
    old_pixels: bytes
    new_pixels: bytes
    width: int
    height: int


def decode_image(data: Optional[bytes]) -> Optional[Image.Image]:
    """
    Decode encoded image bytes into an RGBA image.

    Args:
        data: Encoded image (PNG, JPEG, ...), or None when that revision is absent

    Returns:
        The RGBA image, or None if ``data`` is empty

    Raises:
        ImageDiffError: If the bytes are not a readable image
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return image.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDiffError(f"Could not decode image: {e}", details={"size": len(data)})


def _to_canvas(image: Optional[Image.Image], size: Tuple[int, int]) -> bytes:
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    if image is not None:
        canvas.paste(image, (0, 0))
    return canvas.tobytes()


def load_canvas_pair(old_bytes: Optional[bytes], new_bytes: Optional[bytes]) -> CanvasPair:
    """
    Decode both revisions and place them on a common canvas.

    Args:
        old_bytes: Encoded old image, or None for an added file
        new_bytes: Encoded new image, or None for a deleted file

    Returns:
        A CanvasPair ready for comparison
    """
    old_image = decode_image(old_bytes)
    new_image = decode_image(new_bytes)

    sizes = [image.size for image in (old_image, new_image) if image is not None]
    width = max((size[0] for size in sizes), default=0)
    height = max((size[1] for size in sizes), default=0)

    if width == 0 or height == 0:
        return CanvasPair(b'', b'', 0, 0)

    logger.debug(f"Image canvas {width}x{height} (old={old_image.size if old_image else None}, "
                 f"new={new_image.size if new_image else None})")
    return CanvasPair(
        old_pixels=_to_canvas(old_image, (width, height)),
        new_pixels=_to_canvas(new_image, (width, height)),
        width=width,
        height=height,
    )


def render_diff_png(result: ImageDiffResult) -> bytes:
    """Encode the highlight raster of a comparison as PNG bytes."""
    if result.total == 0:
        return b''
    image = Image.frombytes("RGBA", (result.width, result.height), bytes(result.pixels))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
