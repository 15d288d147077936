# nametag/services/nametag_pipeline/compositor.py
"""
Compositor - Renders a nametag from a template, a name and overlay assets.

Draw order on the fixed-size transparent canvas:

1. Overlay assets, in the order supplied, at the offset for their kind
2. The template base image at the origin
3. The upper-cased name, as glyph images when the template declares a custom
   glyph style whose directory exists, otherwise as a single text run

Draw failures degrade the output rather than failing the render.
"""

from pathlib import Path
from typing import Optional, Sequence

from PIL import Image as PILImage

from ...constants import CANVAS_SIZE, OUTPUT_IMAGE_FORMAT, OVERLAY_OFFSETS
from ...enums import LogEmoji, LoggerName, LogSource
from ...models.asset_model import Asset
from ...models.template_model import Template, TextLayout
from ..logger import get_service_logger
from .generators import GlyphGenerator, TextGenerator
from .utils import FontCache, GlyphCache, composite_at, decode_image, encode_image

logger = get_service_logger(
    LoggerName.NAMETAG_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.IMAGE
)


class Compositor:
    """
    Stateless renderer apart from its font and glyph caches.

    Safe to share between threads: every render works on its own canvas.
    """

    def __init__(
        self,
        font_cache: Optional[FontCache] = None,
        glyph_cache: Optional[GlyphCache] = None,
        resources_path: Optional[Path] = None,
    ):
        """
        Args:
            font_cache: Font cache for the text-run path
            glyph_cache: Glyph image cache for the custom glyph path
            resources_path: Base for relative glyph directories
        """
        self.font_cache = font_cache or FontCache()
        self.glyph_cache = glyph_cache or GlyphCache()
        self.resources_path = Path(resources_path) if resources_path else Path.cwd()
        self.text_generator = TextGenerator(self.font_cache)
        self.glyph_generator = GlyphGenerator(self.glyph_cache)

    def render(
        self, template: Template, name: str, overlays: Sequence[Asset] = ()
    ) -> bytes:
        """
        Render a nametag.

        Args:
            template: Loaded template
            name: Name to draw; drawn upper-cased
            overlays: Assets drawn beneath the template, in order

        Returns:
            Encoded PNG bytes of a canvas of CANVAS_SIZE
        """
        canvas = PILImage.new("RGBA", CANVAS_SIZE, (0, 0, 0, 0))

        for overlay in overlays:
            self._draw_overlay(canvas, overlay)

        if template.base_image is not None:
            composite_at(canvas, template.base_image, (0, 0))
        else:
            logger.warning(
                f"Template {template.index} has no base image, drawing without it",
                extra_context={"template_index": template.index},
                emoji=LogEmoji.WARNING,
            )

        self._draw_name(canvas, name.upper(), template)

        return encode_image(canvas, OUTPUT_IMAGE_FORMAT)

    def _draw_overlay(self, canvas: PILImage.Image, asset: Asset) -> None:
        offset = OVERLAY_OFFSETS.get(asset.kind)
        if offset is None:
            logger.debug(
                f"Skipping {asset.kind.value} asset {asset.resolved_id}",
                extra_context={"resolved_id": asset.resolved_id},
            )
            return

        try:
            image = decode_image(asset.content)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Failed to decode overlay asset {asset.resolved_id}, skipping",
                exception=e,
                extra_context={
                    "requested_id": asset.requested_id,
                    "resolved_id": asset.resolved_id,
                },
            )
            return

        composite_at(canvas, image, offset)

    def _draw_name(self, canvas: PILImage.Image, text: str, template: Template) -> None:
        layout = template.layout
        glyph_directory = self.glyph_directory(layout)

        if glyph_directory is not None:
            self.glyph_generator.render(canvas, text, layout, glyph_directory)
        else:
            self.text_generator.render(canvas, text, layout)

    def glyph_directory(self, layout: TextLayout) -> Optional[Path]:
        """Resolve the layout's glyph directory, or None to use the font path."""
        style = layout.customGlyphs
        if style is None:
            return None

        directory = Path(style.directory)
        if not directory.is_absolute():
            directory = self.resources_path / directory

        if not directory.is_dir():
            logger.warning(
                f"Glyph directory {directory} not found, falling back to font",
                extra_context={"directory": str(directory)},
            )
            return None
        return directory
