# nametag/services/nametag_pipeline/generators/glyph_generator.py
"""
Glyph Generator - Draws the name one character image at a time.

Each character is looked up as ``<directory>/<candidate><extension>`` where the
candidate comes from the style's character map or the character itself. A
missing glyph falls back to the style's fallback character; a space with no
glyph leaves a blank gap; anything else is dropped.

The laid-out run is centred horizontally on the anchor point, and every
element is centred vertically on it by its own height. When the run is wider
than the layout's maximum width, glyph widths, heights and spacing are all
scaled down uniformly to fit.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from PIL import Image as PILImage

from ....enums import LogEmoji, LoggerName, LogSource
from ....models.template_model import CustomGlyphStyle, TextLayout
from ...logger import get_service_logger
from ..utils.glyph_cache import GlyphCache
from ..utils.image_utils import composite_at, resize_nearest

logger = get_service_logger(
    LoggerName.NAMETAG_PIPELINE, LogSource.PIPELINE, default_emoji=LogEmoji.TEXT
)


@dataclass
class GlyphElement:
    """One laid-out character: an image, or a blank placeholder when image is None."""

    character: str
    width: float
    height: float
    image: Optional[PILImage.Image] = None

    @property
    def is_placeholder(self) -> bool:
        return self.image is None


@dataclass
class GlyphRun:
    """A row of glyph elements sized to fit, with the scale that was applied."""

    elements: List[GlyphElement] = field(default_factory=list)
    spacing: float = 0.0
    scale: float = 1.0

    @property
    def total_width(self) -> float:
        if not self.elements:
            return 0.0
        widths = sum(element.width for element in self.elements)
        return widths + (len(self.elements) - 1) * self.spacing


def layout_glyph_run(
    elements: List[GlyphElement], spacing: float, max_width: int
) -> GlyphRun:
    """
    Fit elements into max_width.

    Args:
        elements: Elements at their natural size
        spacing: Gap between adjacent elements
        max_width: Maximum run width, 0 disables fitting

    Returns:
        GlyphRun, uniformly scaled down when its natural width exceeds max_width
    """
    run = GlyphRun(elements=list(elements), spacing=float(spacing))
    natural_width = run.total_width

    if max_width <= 0 or natural_width <= max_width:
        return run

    scale = max_width / natural_width
    return GlyphRun(
        elements=[
            GlyphElement(
                character=element.character,
                width=element.width * scale,
                height=element.height * scale,
                image=element.image,
            )
            for element in elements
        ],
        spacing=spacing * scale,
        scale=scale,
    )


class GlyphGenerator:
    """Renders text from per-character images."""

    def __init__(self, glyph_cache: GlyphCache):
        self.glyph_cache = glyph_cache

    def render(
        self,
        canvas: PILImage.Image,
        text: str,
        layout: TextLayout,
        glyph_directory: Path,
    ) -> float:
        """
        Draw text as glyph images centred on the layout anchor point.

        Args:
            canvas: RGBA canvas drawn onto in place
            text: Text to draw, already cased for display
            layout: Template text layout; must declare customGlyphs
            glyph_directory: Resolved directory holding the glyph images

        Returns:
            Total rendered width in pixels after any scaling
        """
        style = layout.customGlyphs
        if style is None:
            raise ValueError("Glyph rendering requires a customGlyphs style")

        elements = self.build_elements(text, style, glyph_directory)
        run = layout_glyph_run(elements, style.spacing, layout.maxWidth)
        if not run.elements:
            return 0.0

        if run.scale < 1.0:
            logger.debug(
                f"Scaled glyph run by {run.scale:.3f} to fit {layout.maxWidth}px",
                extra_context={"text": text, "scale": run.scale},
            )

        anchor_x, anchor_y = layout.anchorPoint
        x = anchor_x - run.total_width / 2

        for element in run.elements:
            if not element.is_placeholder:
                glyph = resize_nearest(element.image, element.width, element.height)
                y = anchor_y - element.height / 2
                composite_at(canvas, glyph, (int(round(x)), int(round(y))))
            x += element.width + run.spacing

        return run.total_width

    def build_elements(
        self, text: str, style: CustomGlyphStyle, glyph_directory: Path
    ) -> List[GlyphElement]:
        """Resolve every character of text to a glyph element at natural size."""
        elements: List[GlyphElement] = []

        for character in text:
            image = self._load_character(character, style, glyph_directory)

            if image is None and style.fallbackCharacter:
                image = self._load_character(
                    style.fallbackCharacter, style, glyph_directory
                )

            if image is not None:
                width = image.width * style.height / image.height
                elements.append(
                    GlyphElement(
                        character=character,
                        width=width,
                        height=style.height,
                        image=image,
                    )
                )
            elif character == " ":
                gap = (
                    style.missingCharacterSpacing
                    if style.missingCharacterSpacing is not None
                    else style.spacing
                )
                elements.append(GlyphElement(character=character, width=gap, height=0))
            else:
                logger.debug(
                    f"No glyph for character {character!r}, dropping it",
                    extra_context={
                        "character": character,
                        "directory": str(glyph_directory),
                    },
                )

        return elements

    def _load_character(
        self, character: str, style: CustomGlyphStyle, glyph_directory: Path
    ) -> Optional[PILImage.Image]:
        candidate = glyph_candidate(character, style)
        if not _is_safe_filename(candidate):
            return None

        image = self.glyph_cache.get_glyph(glyph_directory / f"{candidate}{style.extension}")
        if image is None or image.width <= 0 or image.height <= 0:
            return None
        return image


def glyph_candidate(character: str, style: CustomGlyphStyle) -> str:
    """
    Map a character to its glyph filename stem.

    The character map is tried with the exact character, then its lower-cased
    form. Unmapped characters use themselves, lower-cased unless the style is
    case sensitive.
    """
    if character in style.characterMap:
        return style.characterMap[character]
    lowered = character.lower()
    if lowered in style.characterMap:
        return style.characterMap[lowered]
    return character if style.caseSensitive else lowered


def _is_safe_filename(stem: str) -> bool:
    return bool(stem) and stem not in (".", "..") and not any(
        separator in stem for separator in ("/", "\\", "\0")
    )
