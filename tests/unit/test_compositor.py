#!/usr/bin/env python3
"""
Unit tests for the Compositor and the single text-run path.

Tests canvas size, overlay offsets and order, degraded draws and the choice
between the font and glyph paths.
"""

import pytest
from PIL import Image, ImageDraw, features

from conftest import decode_png, make_definition
from nametag.enums import AssetKind
from nametag.models.asset_model import Asset
from nametag.models.template_model import Template, TextLayout
from nametag.services.nametag_pipeline import Compositor
from nametag.services.nametag_pipeline.generators import TextGenerator
from nametag.services.nametag_pipeline.utils import FontCache, encode_image

TRANSPARENT = (0, 0, 0, 0)
BLUE = (0, 0, 255, 255)
GREEN = (0, 255, 0, 255)
RED = (255, 0, 0, 255)


def make_asset(image: Image.Image, kind: AssetKind, asset_id: int = 1) -> Asset:
    return Asset(resolved_id=asset_id, content=encode_image(image), kind=kind)


def make_template(base_image=None, **text) -> Template:
    return Template(
        index=0,
        definition=make_definition("base.png", **text),
        base_image=base_image,
    )


@pytest.fixture
def transparent_base():
    return Image.new("RGBA", (128, 128), TRANSPARENT)


@pytest.fixture
def compositor(tmp_path):
    return Compositor(resources_path=tmp_path)


@pytest.mark.unit
class TestCompositor:
    """Tests for Compositor.render."""

    def test_renders_128_square_png(self, compositor, transparent_base):
        content = compositor.render(make_template(transparent_base), "player")

        assert content.startswith(b"\x89PNG")
        image = decode_png(content)
        assert image.size == (128, 128)

    def test_graphic_drawn_at_origin(self, compositor, transparent_base):
        graphic = make_asset(Image.new("RGBA", (128, 128), BLUE), AssetKind.GRAPHIC)

        image = decode_png(compositor.render(make_template(transparent_base), "", [graphic]))

        assert image.getpixel((0, 0)) == BLUE
        assert image.getpixel((127, 127)) == BLUE

    def test_shirt_drawn_at_negative_offset(self, compositor, transparent_base):
        shirt = Image.new("RGBA", (585, 559), TRANSPARENT)
        ImageDraw.Draw(shirt).rectangle([241, 84, 245, 88], fill=GREEN)

        image = decode_png(
            compositor.render(
                make_template(transparent_base), "", [make_asset(shirt, AssetKind.SHIRT)]
            )
        )

        # (241, 84) on the shirt lands at (10, 10) on the canvas
        assert image.getpixel((10, 10)) == GREEN
        assert image.getpixel((14, 14)) == GREEN
        assert image.getpixel((9, 9)) == TRANSPARENT

    def test_unclassified_overlay_ignored(self, compositor, transparent_base):
        overlay = make_asset(Image.new("RGBA", (128, 128), BLUE), AssetKind.UNCLASSIFIED)

        image = decode_png(compositor.render(make_template(transparent_base), "", [overlay]))

        assert image.getbbox() is None

    def test_overlays_drawn_in_order(self, compositor, transparent_base):
        first = make_asset(Image.new("RGBA", (128, 128), BLUE), AssetKind.GRAPHIC, 1)
        second = make_asset(Image.new("RGBA", (64, 64), GREEN), AssetKind.GRAPHIC, 2)

        image = decode_png(
            compositor.render(make_template(transparent_base), "", [first, second])
        )

        assert image.getpixel((10, 10)) == GREEN
        assert image.getpixel((100, 100)) == BLUE

    def test_base_image_drawn_above_overlays(self, compositor):
        base = Image.new("RGBA", (128, 128), TRANSPARENT)
        ImageDraw.Draw(base).rectangle([0, 0, 9, 9], fill=RED)
        overlay = make_asset(Image.new("RGBA", (128, 128), BLUE), AssetKind.GRAPHIC)

        image = decode_png(compositor.render(make_template(base), "", [overlay]))

        assert image.getpixel((5, 5)) == RED
        assert image.getpixel((50, 50)) == BLUE

    def test_undecodable_overlay_skipped(self, compositor, transparent_base):
        broken = Asset(resolved_id=1, content=b"not an image", kind=AssetKind.GRAPHIC)
        good = make_asset(Image.new("RGBA", (128, 128), BLUE), AssetKind.GRAPHIC, 2)

        image = decode_png(
            compositor.render(make_template(transparent_base), "", [broken, good])
        )

        assert image.getpixel((0, 0)) == BLUE

    def test_oversized_overlay_skipped(self, compositor, transparent_base, monkeypatch):
        oversized = make_asset(Image.new("RGBA", (64, 64), BLUE), AssetKind.GRAPHIC)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        content = compositor.render(make_template(transparent_base), "", [oversized])

        monkeypatch.undo()
        assert decode_png(content).getbbox() is None

    def test_missing_base_image(self, compositor):
        image = decode_png(compositor.render(make_template(None), ""))

        assert image.size == (128, 128)
        assert image.getbbox() is None

    def test_name_drawn_with_font(self, compositor, transparent_base):
        template = make_template(transparent_base, colour="#FF0000", maxWidth=0)

        image = decode_png(compositor.render(template, "hello"))

        assert image.getbbox() is not None

    def test_glyph_path_used_when_directory_exists(self, tmp_path, glyph_dir, transparent_base):
        compositor = Compositor(resources_path=tmp_path)
        template = make_template(
            transparent_base,
            anchorPoint=[64, 64],
            customGlyphs={"directory": "glyphs", "height": 20, "spacing": 0},
        )

        image = decode_png(compositor.render(template, "a"))

        # Name is upper-cased, glyph lookup lower-cases it back to a.png
        assert image.getbbox() == (59, 54, 69, 74)
        assert image.getpixel((64, 64)) == RED

    def test_missing_glyph_directory_falls_back_to_font(self, compositor, transparent_base):
        template = make_template(
            transparent_base,
            colour="#00FF00",
            customGlyphs={"directory": "no-such-dir", "height": 20},
        )

        assert compositor.glyph_directory(template.layout) is None
        image = decode_png(compositor.render(template, "hello"))
        assert image.getbbox() is not None


@pytest.mark.unit
class TestTextGenerator:
    """Tests for the single text-run path."""

    @pytest.fixture
    def text_generator(self):
        return TextGenerator(FontCache())

    def test_empty_text_draws_nothing(self, text_generator):
        canvas = Image.new("RGBA", (128, 128), TRANSPARENT)

        assert text_generator.render(canvas, "", TextLayout(anchorPoint=(64, 64))) == 0
        assert canvas.getbbox() is None

    def test_text_centred_on_anchor(self, text_generator):
        canvas = Image.new("RGBA", (128, 128), TRANSPARENT)
        layout = TextLayout(anchorPoint=(64, 64), colour="#FFFFFF")

        width = text_generator.render(canvas, "HELLO", layout)

        assert width > 0
        left, top, right, bottom = canvas.getbbox()
        assert abs((left + right) / 2 - 64) <= 2
        assert top < 64 < bottom

    def test_vertical_position_independent_of_letters(self, text_generator):
        if not features.check("freetype2"):
            pytest.skip("needs a FreeType font for vertical metrics")
        layout = TextLayout(anchorPoint=(64, 64), font={"size": 16, "family": "Nope"})
        tops = []
        for text in ("A", "Ay"):
            canvas = Image.new("RGBA", (128, 128), TRANSPARENT)
            text_generator.render(canvas, text, layout)
            tops.append(canvas.getbbox()[1])

        # The descender of y must not lift the cap of A
        assert tops[0] == tops[1]

    def test_wide_text_condensed_to_max_width(self, text_generator):
        canvas = Image.new("RGBA", (128, 128), TRANSPARENT)
        layout = TextLayout(anchorPoint=(64, 64), maxWidth=20)

        width = text_generator.render(canvas, "A VERY LONG NAME INDEED", layout)

        assert width == 20
        left, _, right, _ = canvas.getbbox()
        assert right - left <= 20


@pytest.mark.unit
class TestFontCache:
    """Tests for font lookup and caching."""

    def test_missing_family_falls_back_to_default(self, tmp_path):
        cache = FontCache(tmp_path)

        font = cache.get_font("Nope", 8)

        assert font is not None
        assert cache.get_stats().fallbacks == 1

    def test_fonts_cached_per_family_and_size(self, tmp_path):
        cache = FontCache(tmp_path)

        first = cache.get_font("Nope", 8)
        second = cache.get_font("Nope", 8)
        cache.get_font("Nope", 12)

        assert first is second
        stats = cache.get_stats()
        assert stats.cache_hits == 1
        assert stats.cache_misses == 2
        assert cache.get_cache_size() == 2

    def test_find_font_file(self, tmp_path):
        (tmp_path / "Pixeled.ttf").write_bytes(b"")
        cache = FontCache(tmp_path)

        assert cache.find_font_file("Pixeled") == tmp_path / "Pixeled.ttf"
        assert cache.find_font_file("Other") is None

    def test_clear_cache(self, tmp_path):
        cache = FontCache(tmp_path)
        cache.get_font("Nope", 8)

        cache.clear_cache()

        assert cache.get_cache_size() == 0
        assert cache.get_stats().total_requests == 0
