# nametag/services/asset_pipeline/utils/content_fetcher.py
"""
Content Fetcher - HTTP retrieval of raw asset bytes from the delivery endpoint.

Every request is bounded by a fixed timeout. Timeouts, connection failures and
non-2xx responses all surface as NetworkError so callers only handle one kind.
"""

from typing import Optional

import requests

from ....constants import (
    ASSET_FETCH_USER_AGENT,
    DEFAULT_ASSET_DELIVERY_URL,
    DEFAULT_ASSET_FETCH_TIMEOUT,
)
from ....enums import LogEmoji, LoggerName, LogSource
from ....exceptions import NetworkError
from ...logger import get_service_logger

logger = get_service_logger(
    LoggerName.ASSET_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.NETWORK
)


class ContentFetcher:
    """
    Fetches raw bytes for asset ids and absolute URLs.

    Stateless apart from configuration, so one instance is shared by all
    resolution threads.
    """

    def __init__(
        self,
        delivery_url: str = DEFAULT_ASSET_DELIVERY_URL,
        timeout: float = DEFAULT_ASSET_FETCH_TIMEOUT,
        user_agent: str = ASSET_FETCH_USER_AGENT,
    ):
        """
        Args:
            delivery_url: Endpoint template containing an '{asset_id}' placeholder
            timeout: Timeout in seconds applied to every request
            user_agent: User-Agent header sent with every request
        """
        self.delivery_url = delivery_url
        self.timeout = timeout
        self.user_agent = user_agent

    def asset_url(self, asset_id: int) -> str:
        """Build the delivery endpoint URL for an asset id."""
        return self.delivery_url.format(asset_id=asset_id)

    def fetch_asset(self, asset_id: int) -> bytes:
        """Fetch the raw content behind an asset id."""
        return self.fetch(self.asset_url(asset_id), asset_id=asset_id)

    def fetch(self, url: str, asset_id: Optional[int] = None) -> bytes:
        """
        Fetch raw bytes from a URL.

        Args:
            url: Absolute HTTP(S) URL
            asset_id: Asset id the fetch is made for, attached to errors

        Returns:
            Response body

        Raises:
            NetworkError: On timeout, connection failure or non-2xx status
        """
        logger.debug(f"Fetching {url}", extra_context={"asset_id": asset_id})

        try:
            response = requests.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
        except requests.Timeout as e:
            raise NetworkError(
                f"Timed out after {self.timeout}s fetching {url}", asset_id=asset_id
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch {url}: {e}", asset_id=asset_id) from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Fetching {url} returned HTTP {response.status_code}",
                asset_id=asset_id,
            )

        return response.content
