"""
Nametag Pipeline Utilities - font and glyph caches and image helpers.
"""

from .font_cache import FontCache, FontCacheStats
from .glyph_cache import GlyphCache, GlyphCacheStats
from .image_utils import (
    composite_at,
    decode_image,
    encode_image,
    ensure_rgba_mode,
    resize_nearest,
)

__all__ = [
    "FontCache",
    "FontCacheStats",
    "GlyphCache",
    "GlyphCacheStats",
    "composite_at",
    "decode_image",
    "encode_image",
    "ensure_rgba_mode",
    "resize_nearest",
]
