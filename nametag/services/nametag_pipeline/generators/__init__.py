"""
Nametag Generators - text and glyph renderers used by the compositor.
"""

from .glyph_generator import (
    GlyphElement,
    GlyphGenerator,
    GlyphRun,
    glyph_candidate,
    layout_glyph_run,
)
from .text_generator import TextGenerator

__all__ = [
    "GlyphElement",
    "GlyphGenerator",
    "GlyphRun",
    "TextGenerator",
    "glyph_candidate",
    "layout_glyph_run",
]
