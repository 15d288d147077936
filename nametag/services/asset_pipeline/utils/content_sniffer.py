# nametag/services/asset_pipeline/utils/content_sniffer.py
"""
Content Sniffer - Content-type detection and dimension probing with Pillow.

Only the image header is read; pixel data is never decoded here.
"""

from io import BytesIO
from typing import Optional, Tuple

from PIL import Image as PILImage
from PIL import UnidentifiedImageError


def detect_mime(content: bytes) -> Optional[str]:
    """
    Detect the MIME type of raw bytes.

    Returns:
        MIME string such as 'image/png', or None when the bytes are not a
        recognised image
    """
    if not content:
        return None

    try:
        with PILImage.open(BytesIO(content)) as image:
            image_format = image.format
    except (
        UnidentifiedImageError,
        OSError,
        ValueError,
        PILImage.DecompressionBombError,
    ):
        return None

    if not image_format:
        return None
    return PILImage.MIME.get(image_format, f"image/{image_format.lower()}")


def is_image(content: bytes) -> bool:
    """Check whether raw bytes sniff as an image."""
    mime = detect_mime(content)
    return mime is not None and mime.startswith("image/")


def probe_dimensions(content: bytes) -> Tuple[int, int]:
    """
    Read (width, height) from an image header.

    Raises:
        ValueError: If the dimensions cannot be read
    """
    try:
        with PILImage.open(BytesIO(content)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError, PILImage.DecompressionBombError) as e:
        raise ValueError(f"Unable to read image dimensions: {e}") from e

    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image dimensions: {width}x{height}")
    return width, height
