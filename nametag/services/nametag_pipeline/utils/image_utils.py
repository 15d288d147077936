# nametag/services/nametag_pipeline/utils/image_utils.py
"""
Image Utilities - Reusable image operations for nametag compositing.

All resampling is nearest-neighbour so pixel-art templates stay crisp.
"""

from io import BytesIO
from typing import Tuple

from PIL import Image as PILImage

from ....constants import OUTPUT_IMAGE_FORMAT


def ensure_rgba_mode(image: PILImage.Image) -> PILImage.Image:
    """Convert image to RGBA if needed."""
    if image.mode != "RGBA":
        return image.convert("RGBA")
    return image


def decode_image(content: bytes) -> PILImage.Image:
    """
    Fully decode raw image bytes into an RGBA image.

    Raises:
        OSError: If the bytes cannot be decoded
        ValueError: If the image exceeds Pillow's pixel limit
    """
    try:
        with PILImage.open(BytesIO(content)) as image:
            return image.convert("RGBA")
    except PILImage.DecompressionBombError as e:
        raise ValueError(str(e)) from e


def resize_nearest(image: PILImage.Image, width: int, height: int) -> PILImage.Image:
    """Resize to an exact size with nearest-neighbour resampling (min 1x1)."""
    size = (max(1, int(round(width))), max(1, int(round(height))))
    if image.size == size:
        return image
    return image.resize(size, PILImage.Resampling.NEAREST)


def composite_at(
    canvas: PILImage.Image, image: PILImage.Image, position: Tuple[int, int]
) -> None:
    """
    Alpha-composite an image onto the canvas in place.

    Positions may be negative or place the image partly off-canvas; the part
    outside the canvas is clipped.
    """
    layer = PILImage.new("RGBA", canvas.size, (0, 0, 0, 0))
    layer.paste(ensure_rgba_mode(image), position)
    canvas.alpha_composite(layer)


def encode_image(image: PILImage.Image, image_format: str = OUTPUT_IMAGE_FORMAT) -> bytes:
    """Encode an image into bytes."""
    buffer = BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()
