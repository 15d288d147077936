#!/usr/bin/env python3
"""
Unit tests for the asset pipeline utilities: descriptor parsing, content
sniffing and HTTP fetching.
"""

from unittest.mock import Mock, patch

import pytest
import requests
from PIL import Image

from conftest import make_descriptor, make_png
from nametag.exceptions import MalformedDescriptorError, NetworkError
from nametag.services.asset_pipeline.utils import (
    ContentFetcher,
    detect_mime,
    extract_asset_id,
    is_absolute_http_url,
    is_image,
    parse_descriptor,
    probe_dimensions,
)

REQUESTS_GET = "nametag.services.asset_pipeline.utils.content_fetcher.requests.get"


@pytest.mark.unit
class TestDescriptorParser:
    """Tests for parse_descriptor and URL helpers."""

    def test_parse_descriptor(self):
        descriptor = parse_descriptor(
            make_descriptor("http://www.roblox.com/asset/?id=123", "Shirt")
        )

        assert descriptor.content_url == "http://www.roblox.com/asset/?id=123"
        assert descriptor.declared_class == "Shirt"

    def test_parse_descriptor_item_as_root(self):
        content = (
            b'<Item class="ShirtGraphic"><Properties>'
            b"<Content name=\"Graphic\"><url> rbxassetid://5 </url></Content>"
            b"</Properties></Item>"
        )

        descriptor = parse_descriptor(content)

        assert descriptor.content_url == "rbxassetid://5"
        assert descriptor.declared_class == "ShirtGraphic"

    def test_parse_descriptor_without_class(self):
        descriptor = parse_descriptor(make_descriptor("rbxassetid://5", None))

        assert descriptor.declared_class is None

    @pytest.mark.parametrize(
        "content",
        [
            b"not xml",
            b"<roblox></roblox>",
            b'<roblox><Item class="Shirt"><Properties><Content><url>  </url>'
            b"</Content></Properties></Item></roblox>",
        ],
    )
    def test_malformed_descriptor(self, content):
        with pytest.raises(MalformedDescriptorError) as exc_info:
            parse_descriptor(content, asset_id=42)

        assert exc_info.value.asset_id == 42

    def test_entity_expansion_rejected(self):
        content = (
            b'<?xml version="1.0"?><!DOCTYPE roblox [<!ENTITY a "aaaa">]>'
            b"<roblox><Item><Properties><Content><url>&a;</url></Content>"
            b"</Properties></Item></roblox>"
        )

        with pytest.raises(MalformedDescriptorError):
            parse_descriptor(content)

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("http://www.roblox.com/asset/?id=123", 123),
            ("https://www.roblox.com/asset?id=77", 77),
            ("http://www.roblox.com/asset/?version=1&id=9", 9),
            ("rbxassetid://555", 555),
            ("https://cdn.example.com/shirt.png", None),
            ("not a url", None),
        ],
    )
    def test_extract_asset_id(self, url, expected):
        assert extract_asset_id(url) == expected

    def test_is_absolute_http_url(self):
        assert is_absolute_http_url("https://cdn.example.com/a.png")
        assert is_absolute_http_url("http://example.com")
        assert not is_absolute_http_url("rbxassetid://5")
        assert not is_absolute_http_url("/relative/path.png")


@pytest.mark.unit
class TestContentSniffer:
    """Tests for content-type detection and dimension probing."""

    def test_detect_png(self):
        assert detect_mime(make_png()) == "image/png"
        assert is_image(make_png())

    def test_non_image(self):
        assert detect_mime(b"<roblox></roblox>") is None
        assert detect_mime(b"") is None
        assert not is_image(b"plain text")

    def test_probe_dimensions(self):
        assert probe_dimensions(make_png(559, 585)) == (559, 585)

    def test_probe_dimensions_failure(self):
        with pytest.raises(ValueError):
            probe_dimensions(b"not an image")

    def test_oversized_image_rejected(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        content = make_png(10, 10)

        assert detect_mime(content) is None
        with pytest.raises(ValueError):
            probe_dimensions(content)


@pytest.mark.unit
class TestContentFetcher:
    """Tests for ContentFetcher with requests mocked out."""

    def test_asset_url(self):
        fetcher = ContentFetcher(delivery_url="https://assets.test/{asset_id}/raw")

        assert fetcher.asset_url(12) == "https://assets.test/12/raw"

    def test_fetch_asset_returns_body(self):
        fetcher = ContentFetcher(delivery_url="https://assets.test/?id={asset_id}", timeout=2.5)
        response = Mock(status_code=200, content=b"payload")

        with patch(REQUESTS_GET, return_value=response) as mock_get:
            assert fetcher.fetch_asset(7) == b"payload"

        args, kwargs = mock_get.call_args
        assert args[0] == "https://assets.test/?id=7"
        assert kwargs["timeout"] == 2.5
        assert "User-Agent" in kwargs["headers"]

    def test_non_success_status(self):
        fetcher = ContentFetcher()

        with patch(REQUESTS_GET, return_value=Mock(status_code=404, content=b"")):
            with pytest.raises(NetworkError) as exc_info:
                fetcher.fetch_asset(7)

        assert exc_info.value.asset_id == 7
        assert "404" in str(exc_info.value)

    def test_timeout(self):
        fetcher = ContentFetcher(timeout=0.1)

        with patch(REQUESTS_GET, side_effect=requests.Timeout("slow")):
            with pytest.raises(NetworkError) as exc_info:
                fetcher.fetch_asset(3)

        assert exc_info.value.asset_id == 3

    def test_connection_error(self):
        fetcher = ContentFetcher()

        with patch(REQUESTS_GET, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(NetworkError):
                fetcher.fetch("https://cdn.example.com/a.png", asset_id=1)
