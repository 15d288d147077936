# nametag/services/nametag_pipeline/utils/font_cache.py
"""
Font Cache - Cached font loading for the single text-run rendering path.

Fonts are looked up by family name in the resources fonts directory
(``<family>.ttf`` or ``<family>.otf``) and cached per (family, size). When no
file exists for a family, Pillow's bundled scalable default font is used.
"""

from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple, Union

from PIL import ImageFont

from ....constants import FONT_FILE_EXTENSIONS
from ....enums import LogEmoji, LoggerName, LogSource
from ...logger import get_service_logger

logger = get_service_logger(
    LoggerName.NAMETAG_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.TEXT
)

LoadedFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


@dataclass
class FontCacheStats:
    """Statistics for font cache performance monitoring."""

    cache_hits: int = 0
    cache_misses: int = 0
    fonts_loaded: int = 0
    fallbacks: int = 0
    total_requests: int = 0

    @property
    def hit_ratio(self) -> float:
        """Calculate cache hit ratio as percentage."""
        if self.total_requests == 0:
            return 0.0
        return (self.cache_hits / self.total_requests) * 100.0


class FontCache:
    """
    Thread-safe font cache keyed by family and size.

    One instance is shared by every render; the lock covers both lookup and
    load so a font file is opened at most once per size.
    """

    def __init__(self, fonts_directory: Optional[Path] = None):
        self.fonts_directory = Path(fonts_directory) if fonts_directory else None
        self._font_cache: Dict[Tuple[str, int], LoadedFont] = {}
        self._cache_lock = Lock()
        self._stats = FontCacheStats()

    def get_font(self, font_family: str, size: int) -> LoadedFont:
        """
        Get a font, loading it on first use.

        Args:
            font_family: Font family name, matched against font file stems
            size: Font size in pixels

        Returns:
            Loaded font object, Pillow's default font if the family is unavailable
        """
        cache_key = (font_family, size)

        with self._cache_lock:
            self._stats.total_requests += 1

            if cache_key in self._font_cache:
                self._stats.cache_hits += 1
                return self._font_cache[cache_key]

            self._stats.cache_misses += 1
            font = self._load_font_with_fallback(font_family, size)
            self._font_cache[cache_key] = font
            self._stats.fonts_loaded += 1

            return font

    def find_font_file(self, font_family: str) -> Optional[Path]:
        """Locate the font file for a family, if one is installed."""
        if self.fonts_directory is None or not self.fonts_directory.is_dir():
            return None

        for extension in FONT_FILE_EXTENSIONS:
            candidate = self.fonts_directory / f"{font_family}{extension}"
            if candidate.is_file():
                return candidate
        return None

    def _load_font_with_fallback(self, font_family: str, size: int) -> LoadedFont:
        font_path = self.find_font_file(font_family)
        if font_path is not None:
            try:
                logger.debug(f"Loading font {font_family}:{size} from {font_path}")
                return ImageFont.truetype(str(font_path), size)
            except OSError as e:
                logger.warning(
                    f"Failed to load font from {font_path}",
                    exception=e,
                    extra_context={"font_family": font_family, "size": size},
                )

        logger.warning(
            f"Font {font_family}:{size} not found, using default font",
            extra_context={"fonts_directory": str(self.fonts_directory)},
        )
        self._stats.fallbacks += 1
        return ImageFont.load_default(size=size)

    def get_stats(self) -> FontCacheStats:
        """Get current cache performance statistics."""
        with self._cache_lock:
            return FontCacheStats(
                cache_hits=self._stats.cache_hits,
                cache_misses=self._stats.cache_misses,
                fonts_loaded=self._stats.fonts_loaded,
                fallbacks=self._stats.fallbacks,
                total_requests=self._stats.total_requests,
            )

    def clear_cache(self) -> None:
        """Clear font cache (useful for testing)."""
        with self._cache_lock:
            self._font_cache.clear()
            self._stats = FontCacheStats()

    def get_cache_size(self) -> int:
        with self._cache_lock:
            return len(self._font_cache)
