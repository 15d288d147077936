# nametag/services/asset_pipeline/asset_cache.py
"""
Asset Cache - Process-lifetime store of resolved assets.

Each entry answers to its requested id, its resolved id and any linked ids, all
held in a dict index so lookups do not scan the entries. The cache is unbounded
and has no removal operation. All access goes through one lock, and
link_or_insert() is the single mutation point the resolver uses, so the
re-check by resolved id and the insert happen atomically.
"""

from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Optional

from ...enums import AssetKind, LogEmoji, LoggerName, LogSource
from ...models.asset_model import Asset
from ..logger import get_service_logger

logger = get_service_logger(
    LoggerName.ASSET_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.CACHE
)


@dataclass
class AssetCacheStats:
    """Statistics for asset cache monitoring."""

    cache_hits: int = 0
    cache_misses: int = 0
    entries: int = 0
    links: int = 0

    @property
    def hit_ratio(self) -> float:
        """Calculate cache hit ratio as percentage."""
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return (self.cache_hits / total) * 100.0


class AssetCache:
    """
    Thread-safe keyed store of Asset instances.

    Constructed once at startup and injected into the resolver; it lives until
    the process exits.
    """

    def __init__(self):
        self._assets: List[Asset] = []
        # Every requested, resolved and linked id, first entry wins
        self._by_id: Dict[int, Asset] = {}
        self._by_resolved_id: Dict[int, Asset] = {}
        self._lock = Lock()
        self._stats = AssetCacheStats()

    def find(self, asset_id: int) -> Optional[Asset]:
        """
        Look up an asset by requested or resolved id.

        Returns:
            The cached Asset, or None on a miss
        """
        with self._lock:
            asset = self._by_id.get(asset_id)
            if asset is None:
                self._stats.cache_misses += 1
            else:
                self._stats.cache_hits += 1
            return asset

    def insert(self, asset: Asset) -> None:
        """
        Add an entry without deduplication.

        Callers that need the one-entry-per-resolved-id guarantee use
        link_or_insert() instead.
        """
        with self._lock:
            self._add_unlocked(asset)

    def link_or_insert(self, asset: Asset) -> Asset:
        """
        Store a freshly resolved asset, or merge it into an existing entry.

        When an entry with the same resolved id exists, the new requested id is
        linked onto it (as requested_id if it has none yet, otherwise as an
        extra lookup key) and its kind is backfilled if it was unclassified.
        The existing entry is returned and nothing is inserted.

        Returns:
            The canonical Asset for the resolved id
        """
        with self._lock:
            existing = self._by_resolved_id.get(asset.resolved_id)
            if existing is None:
                self._add_unlocked(asset)
                logger.debug(
                    f"Cached asset {asset.resolved_id}",
                    extra_context={
                        "requested_id": asset.requested_id,
                        "resolved_id": asset.resolved_id,
                        "kind": asset.kind.value,
                    },
                )
                return asset

            requested_id = asset.requested_id
            if requested_id is not None and not existing.matches(requested_id):
                if existing.requested_id is None:
                    existing.requested_id = requested_id
                else:
                    existing.linked_ids.add(requested_id)
                self._by_id.setdefault(requested_id, existing)
                self._stats.links += 1
            if (
                existing.kind == AssetKind.UNCLASSIFIED
                and asset.kind != AssetKind.UNCLASSIFIED
            ):
                existing.kind = asset.kind

            logger.debug(
                f"Asset {asset.resolved_id} already cached, linked requested id",
                extra_context={
                    "requested_id": asset.requested_id,
                    "resolved_id": existing.resolved_id,
                },
            )
            return existing

    def get_stats(self) -> AssetCacheStats:
        """Get a snapshot of cache statistics."""
        with self._lock:
            return AssetCacheStats(
                cache_hits=self._stats.cache_hits,
                cache_misses=self._stats.cache_misses,
                entries=len(self._assets),
                links=self._stats.links,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._assets)

    def _add_unlocked(self, asset: Asset) -> None:
        self._assets.append(asset)
        self._stats.entries = len(self._assets)
        self._by_resolved_id.setdefault(asset.resolved_id, asset)
        for asset_id in (asset.requested_id, asset.resolved_id, *asset.linked_ids):
            if asset_id is not None:
                self._by_id.setdefault(asset_id, asset)
