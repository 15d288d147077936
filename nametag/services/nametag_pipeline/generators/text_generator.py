# nametag/services/nametag_pipeline/generators/text_generator.py
"""
Text Generator - Draws the name as a single run of text in the layout font.

The run is centred horizontally on the layout anchor point and vertically on
the font's middle line (halfway between ascender and descender), so the
position does not depend on which letters are drawn. A run wider than the
layout's maximum width is condensed horizontally to fit, keeping its height.
"""

from PIL import Image as PILImage
from PIL import ImageDraw, ImageFont

from ....enums import LogEmoji, LoggerName, LogSource
from ....models.template_model import TextLayout
from ...logger import get_service_logger
from ..utils.font_cache import FontCache
from ..utils.image_utils import composite_at, resize_nearest

logger = get_service_logger(
    LoggerName.NAMETAG_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.TEXT
)


class TextGenerator:
    """Renders a text run onto a canvas."""

    def __init__(self, font_cache: FontCache):
        self.font_cache = font_cache

    def render(self, canvas: PILImage.Image, text: str, layout: TextLayout) -> int:
        """
        Draw text centred on the layout anchor point.

        Args:
            canvas: RGBA canvas drawn onto in place
            text: Text to draw, already cased for display
            layout: Template text layout

        Returns:
            Rendered width in pixels (0 when nothing was drawn)
        """
        if not text:
            return 0

        font = self.font_cache.get_font(layout.font.family, layout.font.size)

        # Bitmap fonts have no vertical metrics; their ink box is centred instead
        anchor = "lm" if isinstance(font, ImageFont.FreeTypeFont) else None

        measure = ImageDraw.Draw(PILImage.new("RGBA", (1, 1)))
        left, top, right, bottom = measure.textbbox(
            (0, 0), text, font=font, anchor=anchor
        )
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return 0

        text_layer = PILImage.new("RGBA", (width, height), (0, 0, 0, 0))
        # Pixel fonts: no anti-aliasing
        draw = ImageDraw.Draw(text_layer)
        draw.fontmode = "1"
        draw.text((-left, -top), text, font=font, fill=layout.colour, anchor=anchor)

        max_width = layout.maxWidth
        if max_width > 0 and width > max_width:
            logger.debug(
                f"Condensing text from {width}px to {max_width}px",
                extra_context={"text": text, "width": width, "max_width": max_width},
            )
            text_layer = resize_nearest(text_layer, max_width, height)
            width = max_width

        anchor_x, anchor_y = layout.anchorPoint
        offset_y = top if anchor is not None else -height / 2
        position = (int(round(anchor_x - width / 2)), int(round(anchor_y + offset_y)))
        composite_at(canvas, text_layer, position)

        return width
