# nametag/constants.py
"""
Global Constants for the nametag service.

Centralized location for all application constants to avoid hardcoded values
throughout the codebase.
"""

from typing import Dict, Tuple

from .enums import AssetKind

# =============================================================================
# ASSET DELIVERY
# =============================================================================

DEFAULT_ASSET_DELIVERY_URL = "https://assetdelivery.roblox.com/v1/asset/?id={asset_id}"
DEFAULT_ASSET_FETCH_TIMEOUT = 5.0
DEFAULT_MAX_CONCURRENT_FETCHES = 8
ASSET_FETCH_USER_AGENT = "nametag-service/1.0"

# Descriptor item classes mapped onto asset kinds
DESCRIPTOR_CLASS_KINDS: Dict[str, AssetKind] = {
    "Shirt": AssetKind.SHIRT,
    "ShirtGraphic": AssetKind.GRAPHIC,
}

# =============================================================================
# ASPECT RATIO CLASSIFICATION (height / width)
# =============================================================================

SHIRT_ASPECT_RATIO = 585 / 559
GRAPHIC_ASPECT_RATIO = 1.0
ASPECT_RATIO_TOLERANCE = 0.015

# =============================================================================
# COMPOSITING
# =============================================================================

CANVAS_SIZE: Tuple[int, int] = (128, 128)
OUTPUT_IMAGE_FORMAT = "PNG"

# Unclassified assets have no entry and are never drawn
OVERLAY_OFFSETS: Dict[AssetKind, Tuple[int, int]] = {
    AssetKind.SHIRT: (-231, -74),
    AssetKind.GRAPHIC: (0, 0),
}

# =============================================================================
# TEXT & GLYPHS
# =============================================================================

DEFAULT_FONT_FAMILY = "Pixeled"
DEFAULT_FONT_SIZE = 8
DEFAULT_TEXT_COLOUR = "#FFFFFF"
DEFAULT_GLYPH_EXTENSION = ".png"
FONT_FILE_EXTENSIONS = [".ttf", ".otf"]

# =============================================================================
# HTTP
# =============================================================================

DEFAULT_API_PORT = 3000
DEFAULT_CORS_ORIGIN_REGEX = (
    r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"
    r"|^https?://([a-z0-9-]+\.)*(yan3321\.com|yan\.gg|mysver\.se)$"
)
IMAGE_CACHE_CONTROL = "public"
UNKNOWN_ERROR_MESSAGE = "Unknown error occured"
