#!/usr/bin/env python3
# tests/conftest.py
"""
Pytest configuration and shared fixtures for nametag service tests.
"""

import time
from io import BytesIO
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple, Union

import pytest
from PIL import Image

from nametag.exceptions import NetworkError
from nametag.models.template_model import TemplateDefinition
from nametag.services.asset_pipeline import AssetCache, AssetResolver

Colour = Tuple[int, int, int, int]


def make_png(
    width: int = 10, height: int = 10, colour: Colour = (255, 0, 0, 255)
) -> bytes:
    """Encode a solid-colour RGBA PNG."""
    buffer = BytesIO()
    Image.new("RGBA", (width, height), colour).save(buffer, format="PNG")
    return buffer.getvalue()


def make_descriptor(url: str, item_class: Optional[str] = "ShirtGraphic") -> bytes:
    """Build an asset descriptor document pointing at url."""
    class_attribute = f' class="{item_class}"' if item_class else ""
    return (
        '<roblox version="4">'
        f'<Item{class_attribute} referent="RBX0">'
        "<Properties>"
        f'<Content name="Graphic"><url>{url}</url></Content>'
        '<string name="Name">Test</string>'
        "</Properties>"
        "</Item>"
        "</roblox>"
    ).encode("utf-8")


def decode_png(content: bytes) -> Image.Image:
    with Image.open(BytesIO(content)) as image:
        image.load()
        return image.convert("RGBA")


class FakeFetcher:
    """
    In-memory stand-in for ContentFetcher.

    Responses map asset ids (and absolute URLs) to bytes or to an exception to
    raise. Every call is counted.
    """

    def __init__(
        self,
        assets: Optional[Dict[int, Union[bytes, Exception]]] = None,
        urls: Optional[Dict[str, Union[bytes, Exception]]] = None,
        delays: Optional[Dict[int, float]] = None,
    ):
        self.assets = dict(assets or {})
        self.urls = dict(urls or {})
        self.delays = dict(delays or {})
        self.asset_calls: Dict[int, int] = {}
        self.url_calls: Dict[str, int] = {}
        self._lock = Lock()

    def fetch_asset(self, asset_id: int) -> bytes:
        with self._lock:
            self.asset_calls[asset_id] = self.asset_calls.get(asset_id, 0) + 1
        if asset_id in self.delays:
            time.sleep(self.delays[asset_id])
        return self._respond(self.assets.get(asset_id), asset_id, f"asset {asset_id}")

    def fetch(self, url: str, asset_id: Optional[int] = None) -> bytes:
        with self._lock:
            self.url_calls[url] = self.url_calls.get(url, 0) + 1
        return self._respond(self.urls.get(url), asset_id, url)

    @property
    def total_calls(self) -> int:
        return sum(self.asset_calls.values()) + sum(self.url_calls.values())

    @staticmethod
    def _respond(response, asset_id: Optional[int], target: str) -> bytes:
        if response is None:
            raise NetworkError(f"Fetching {target} returned HTTP 404", asset_id=asset_id)
        if isinstance(response, Exception):
            raise response
        return response


def make_definition(
    image_path: str = "base.png",
    name: str = "Test Template",
    preview_asset_id: Optional[int] = None,
    **text,
) -> TemplateDefinition:
    text_layout = {
        "font": {"size": "8px", "family": "Missing Family"},
        "colour": "#FFFFFF",
        "anchorPoint": [64, 64],
        "maxWidth": 100,
    }
    text_layout.update(text)
    return TemplateDefinition(
        name=name,
        category="Test",
        type="Nametag",
        variant=1,
        imagePath=image_path,
        previewAssetId=preview_asset_id,
        text=text_layout,
    )


@pytest.fixture
def asset_cache():
    """Provide a fresh AssetCache for each test."""
    return AssetCache()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def resolver(asset_cache, fake_fetcher):
    return AssetResolver(asset_cache, fake_fetcher, max_concurrent_fetches=4)


@pytest.fixture
def templates_dir(tmp_path) -> Path:
    """Directory with a transparent base image and an opaque one."""
    directory = tmp_path / "templates"
    directory.mkdir()
    Image.new("RGBA", (128, 128), (0, 0, 0, 0)).save(directory / "base.png")
    Image.new("RGBA", (128, 128), (0, 0, 255, 255)).save(directory / "blue.png")
    return directory


@pytest.fixture
def glyph_dir(tmp_path) -> Path:
    """Glyph images: 'a' is 10x20 red, 'b' is 20x20 green, 'exclaim' is 5x20 blue."""
    directory = tmp_path / "glyphs"
    directory.mkdir()
    Image.new("RGBA", (10, 20), (255, 0, 0, 255)).save(directory / "a.png")
    Image.new("RGBA", (20, 20), (0, 255, 0, 255)).save(directory / "b.png")
    Image.new("RGBA", (5, 20), (0, 0, 255, 255)).save(directory / "exclaim.png")
    return directory
