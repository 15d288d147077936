# nametag/services/asset_pipeline/asset_resolver.py
"""
Asset Resolver - Turns opaque asset ids into cached, classified image assets.

An id either names an image directly or names an XML descriptor whose content
URL points at the real image, through a second asset id or a raw URL. One level
of indirection is followed. Results are deduplicated in the AssetCache by both
the requested id and the resolved id.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Tuple

from ...constants import (
    ASPECT_RATIO_TOLERANCE,
    DEFAULT_MAX_CONCURRENT_FETCHES,
    DESCRIPTOR_CLASS_KINDS,
    GRAPHIC_ASPECT_RATIO,
    SHIRT_ASPECT_RATIO,
)
from ...enums import AssetKind, LogEmoji, LoggerName, LogSource
from ...exceptions import (
    MalformedDescriptorError,
    ResolutionError,
    UnresolvableContentError,
)
from ...models.asset_model import Asset
from ..logger import get_service_logger
from .asset_cache import AssetCache
from .utils import (
    ContentFetcher,
    extract_asset_id,
    is_absolute_http_url,
    is_image,
    parse_descriptor,
    probe_dimensions,
)

logger = get_service_logger(
    LoggerName.ASSET_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.IMAGE
)


def classify_aspect_ratio(width: int, height: int) -> AssetKind:
    """
    Infer an asset's kind from its height/width ratio.

    Shirt textures are 585x559; shirt graphics are square.
    """
    if width <= 0 or height <= 0:
        return AssetKind.UNCLASSIFIED

    ratio = height / width
    if abs(ratio - SHIRT_ASPECT_RATIO) <= ASPECT_RATIO_TOLERANCE:
        return AssetKind.SHIRT
    if abs(ratio - GRAPHIC_ASPECT_RATIO) <= ASPECT_RATIO_TOLERANCE:
        return AssetKind.GRAPHIC
    return AssetKind.UNCLASSIFIED


class AssetResolver:
    """
    Resolves asset ids into Asset instances, consulting and populating a cache.

    Safe to call from multiple threads: all cache mutation goes through
    AssetCache.link_or_insert().
    """

    def __init__(
        self,
        cache: AssetCache,
        fetcher: Optional[ContentFetcher] = None,
        max_concurrent_fetches: int = DEFAULT_MAX_CONCURRENT_FETCHES,
    ):
        """
        Initialize asset resolver.

        Args:
            cache: Cache shared by every resolution
            fetcher: Content fetcher (a default-configured one if omitted)
            max_concurrent_fetches: Upper bound on worker threads for resolve_many
        """
        self.cache = cache
        self.fetcher = fetcher or ContentFetcher()
        self.max_concurrent_fetches = max(1, max_concurrent_fetches)

    def resolve(self, asset_id: int) -> Asset:
        """
        Resolve a single asset id.

        Args:
            asset_id: Id to resolve

        Returns:
            The canonical cached Asset

        Raises:
            NetworkError: If a fetch fails or times out
            MalformedDescriptorError: If a non-image response is not a usable descriptor
            UnresolvableContentError: If the followed content is not an image
        """
        cached = self.cache.find(asset_id)
        if cached is not None:
            return cached

        content = self.fetcher.fetch_asset(asset_id)

        if is_image(content):
            # Direct image: the requested id is the content id, nothing to link
            asset = Asset(
                resolved_id=asset_id,
                content=content,
                kind=self._infer_kind(content, asset_id),
            )
            return self.cache.link_or_insert(asset)

        resolved_id, content, declared_kind = self._follow_descriptor(asset_id, content)

        if declared_kind is None:
            declared_kind = self._infer_kind(content, asset_id)

        asset = Asset(
            resolved_id=resolved_id,
            content=content,
            kind=declared_kind,
            requested_id=asset_id,
        )
        resolved = self.cache.link_or_insert(asset)

        logger.debug(
            f"Resolved asset {asset_id} through descriptor",
            extra_context={
                "requested_id": asset_id,
                "resolved_id": resolved.resolved_id,
                "kind": resolved.kind.value,
            },
        )
        return resolved

    def resolve_many(self, asset_ids: Iterable[int]) -> List[Asset]:
        """
        Resolve several ids concurrently.

        Failures are logged with the requested id and dropped. Successes are
        returned in the order their ids were given, whatever order the fetches
        complete in.
        """
        ids = list(asset_ids)
        if not ids:
            return []

        workers = min(self.max_concurrent_fetches, len(ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.resolve, asset_id) for asset_id in ids]

            assets: List[Asset] = []
            for asset_id, future in zip(ids, futures):
                try:
                    assets.append(future.result())
                except ResolutionError as e:
                    logger.warning(
                        f"Failed to resolve asset {asset_id}: {e}",
                        extra_context={
                            "asset_id": asset_id,
                            "error_type": type(e).__name__,
                        },
                        emoji=LogEmoji.FAILED,
                    )
                except Exception as e:
                    logger.error(
                        f"Unexpected error resolving asset {asset_id}",
                        exception=e,
                        extra_context={"asset_id": asset_id},
                    )

        return assets

    def _follow_descriptor(
        self, asset_id: int, content: bytes
    ) -> Tuple[int, bytes, Optional[AssetKind]]:
        """Follow one level of descriptor indirection to image content."""
        descriptor = parse_descriptor(content, asset_id=asset_id)
        declared_kind = DESCRIPTOR_CLASS_KINDS.get(descriptor.declared_class or "")
        url = descriptor.content_url

        target_id = extract_asset_id(url)
        if target_id is not None:
            target = self.cache.find(target_id)
            if target is not None:
                return target.resolved_id, target.content, declared_kind
            resolved_id = target_id
            content = self.fetcher.fetch_asset(target_id)
        elif is_absolute_http_url(url):
            resolved_id = asset_id
            content = self.fetcher.fetch(url, asset_id=asset_id)
        else:
            raise MalformedDescriptorError(
                f"Asset {asset_id} descriptor has an unusable content URL: {url}",
                asset_id=asset_id,
            )

        if not is_image(content):
            raise UnresolvableContentError(
                f"Asset {asset_id} descriptor points at content that is not an image",
                asset_id=asset_id,
            )

        return resolved_id, content, declared_kind

    def _infer_kind(self, content: bytes, asset_id: int) -> AssetKind:
        try:
            width, height = probe_dimensions(content)
        except ValueError as e:
            logger.warning(
                f"Could not read dimensions of asset {asset_id}, leaving unclassified",
                exception=e,
                extra_context={"asset_id": asset_id},
            )
            return AssetKind.UNCLASSIFIED

        return classify_aspect_ratio(width, height)
