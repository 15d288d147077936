# nametag/services/nametag_pipeline/utils/glyph_cache.py
"""
Glyph Cache - Decoded per-character images for the custom glyph path.

Glyph directories are read-only resources. Each directory is listed once and
lookups are checked against that listing, so only files that exist are ever
cached and the cache is bounded by the number of glyph files on disk.
"""

from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Dict, FrozenSet, Optional

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from ....enums import LogEmoji, LoggerName, LogSource
from ...logger import get_service_logger

logger = get_service_logger(
    LoggerName.NAMETAG_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.TEXT
)


@dataclass
class GlyphCacheStats:
    cache_hits: int = 0
    cache_misses: int = 0
    missing_files: int = 0
    directories_listed: int = 0


class GlyphCache:
    """Thread-safe cache of glyph images keyed by file path."""

    def __init__(self):
        self._glyphs: Dict[Path, Optional[PILImage.Image]] = {}
        self._listings: Dict[Path, FrozenSet[str]] = {}
        self._lock = Lock()
        self._stats = GlyphCacheStats()

    def get_glyph(self, path: Path) -> Optional[PILImage.Image]:
        """
        Load a glyph image.

        Returns:
            The decoded RGBA image, or None when the file is absent or unreadable
        """
        path = Path(path)
        with self._lock:
            if path.name not in self._listing(path.parent):
                self._stats.missing_files += 1
                return None

            if path in self._glyphs:
                self._stats.cache_hits += 1
                return self._glyphs[path]

            self._stats.cache_misses += 1
            # Unreadable files are stored as None; they are still listed files
            glyph = self._load(path)
            self._glyphs[path] = glyph
            return glyph

    def get_cache_size(self) -> int:
        """Number of cached glyph files."""
        with self._lock:
            return len(self._glyphs)

    def _listing(self, directory: Path) -> FrozenSet[str]:
        listing = self._listings.get(directory)
        if listing is None:
            try:
                listing = frozenset(
                    entry.name for entry in directory.iterdir() if entry.is_file()
                )
            except OSError as e:
                logger.warning(
                    f"Unable to list glyph directory {directory}",
                    exception=e,
                    extra_context={"directory": str(directory)},
                )
                listing = frozenset()
            self._listings[directory] = listing
            self._stats.directories_listed += 1
        return listing

    def _load(self, path: Path) -> Optional[PILImage.Image]:
        try:
            with PILImage.open(path) as image:
                return image.convert("RGBA")
        except (UnidentifiedImageError, OSError, PILImage.DecompressionBombError) as e:
            logger.warning(
                f"Failed to decode glyph image {path.name}",
                exception=e,
                extra_context={"path": str(path)},
            )
            return None

    def get_stats(self) -> GlyphCacheStats:
        with self._lock:
            return GlyphCacheStats(
                cache_hits=self._stats.cache_hits,
                cache_misses=self._stats.cache_misses,
                missing_files=self._stats.missing_files,
                directories_listed=self._stats.directories_listed,
            )

    def clear_cache(self) -> None:
        with self._lock:
            self._glyphs.clear()
            self._listings.clear()
            self._stats = GlyphCacheStats()
