"""
Asset Pipeline - resolution, classification and caching of external image assets.
"""

from .asset_cache import AssetCache, AssetCacheStats
from .asset_resolver import AssetResolver, classify_aspect_ratio
from .utils import ContentFetcher

__all__ = [
    "AssetCache",
    "AssetCacheStats",
    "AssetResolver",
    "ContentFetcher",
    "classify_aspect_ratio",
]
