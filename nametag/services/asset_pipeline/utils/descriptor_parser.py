# nametag/services/asset_pipeline/utils/descriptor_parser.py
"""
Descriptor Parser - Reads indirection descriptors returned for non-image assets.

A descriptor is an XML document of the form:

    <roblox version="4">
      <Item class="ShirtGraphic">
        <Properties>
          <Content name="Graphic"><url>http://www.roblox.com/asset/?id=123</url></Content>
        </Properties>
      </Item>
    </roblox>

Only the item's ``class`` attribute and the nested content URL are read.
"""

import re
from typing import Optional
from urllib.parse import urlparse

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ....exceptions import MalformedDescriptorError
from ....models.asset_model import AssetDescriptor

ASSET_ID_PATTERNS = [
    re.compile(r"^rbxassetid://(\d+)$", re.IGNORECASE),
    re.compile(r"/asset/?\?(?:[^#]*&)?id=(\d+)", re.IGNORECASE),
]


def parse_descriptor(content: bytes, asset_id: Optional[int] = None) -> AssetDescriptor:
    """
    Parse an indirection descriptor.

    Args:
        content: Raw XML bytes
        asset_id: Requested asset id, attached to errors

    Returns:
        AssetDescriptor with the content URL and declared item class

    Raises:
        MalformedDescriptorError: If the XML is unparsable or lacks a content URL
    """
    try:
        root = ET.fromstring(content)
    except (ET.ParseError, DefusedXmlException, ValueError) as e:
        raise MalformedDescriptorError(
            f"Asset {asset_id} descriptor is not valid XML: {e}", asset_id=asset_id
        ) from e

    item = root if root.tag == "Item" else root.find("Item")
    if item is None:
        raise MalformedDescriptorError(
            f"Asset {asset_id} descriptor has no Item element", asset_id=asset_id
        )

    url_element = item.find("./Properties/Content/url")
    url = (url_element.text or "").strip() if url_element is not None else ""
    if not url:
        raise MalformedDescriptorError(
            f"Asset {asset_id} descriptor has no content URL", asset_id=asset_id
        )

    return AssetDescriptor(content_url=url, declared_class=item.get("class"))


def extract_asset_id(url: str) -> Optional[int]:
    """Extract a numeric asset id embedded in a content URL, if any."""
    for pattern in ASSET_ID_PATTERNS:
        match = pattern.search(url.strip())
        if match:
            return int(match.group(1))
    return None


def is_absolute_http_url(url: str) -> bool:
    """Check whether a URL can be fetched directly."""
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
