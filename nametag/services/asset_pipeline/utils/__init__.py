"""
Asset Pipeline Utilities - fetching, sniffing and descriptor parsing.
"""

from .content_fetcher import ContentFetcher
from .content_sniffer import detect_mime, is_image, probe_dimensions
from .descriptor_parser import extract_asset_id, is_absolute_http_url, parse_descriptor

__all__ = [
    "ContentFetcher",
    "detect_mime",
    "is_image",
    "probe_dimensions",
    "parse_descriptor",
    "extract_asset_id",
    "is_absolute_http_url",
]
