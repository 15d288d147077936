# nametag/models/template_model.py
"""
Template models - Pydantic models for nametag template definitions.

This module provides type-safe interfaces for the template system including:
- Text layout (font, colour, anchor point, max width)
- Optional custom glyph style for per-character image rendering
- Loaded runtime templates holding the decoded base image and preview asset
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from PIL import Image as PILImage
from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_GLYPH_EXTENSION,
    DEFAULT_TEXT_COLOUR,
)
from .asset_model import Asset, AssetSummary

_FONT_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$", re.IGNORECASE)


class FontSpec(BaseModel):
    """Font used by the single text-run rendering path"""

    size: int = Field(DEFAULT_FONT_SIZE, gt=0, le=128, description="Font size in pixels")
    family: str = Field(DEFAULT_FONT_FAMILY, description="Font family name")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("size", mode="before")
    @classmethod
    def parse_size(cls, v: Union[int, float, str]) -> int:
        """Accept CSS-style sizes such as '8px'"""
        if isinstance(v, str):
            match = _FONT_SIZE_PATTERN.match(v)
            if not match:
                raise ValueError(f"Invalid font size '{v}'")
            return int(float(match.group(1)))
        return v


class CustomGlyphStyle(BaseModel):
    """Per-character image style used instead of a font"""

    directory: str = Field(..., description="Directory holding one image per character")
    height: int = Field(..., gt=0, description="Target glyph height in pixels")
    spacing: int = Field(0, ge=0, description="Spacing between glyphs in pixels")
    extension: str = Field(DEFAULT_GLYPH_EXTENSION, description="Glyph file extension")
    caseSensitive: bool = Field(
        False, description="Keep character case when building glyph filenames"
    )
    characterMap: Dict[str, str] = Field(
        default_factory=dict, description="Character to filename overrides"
    )
    fallbackCharacter: Optional[str] = Field(
        None, description="Character drawn when a glyph image is missing"
    )
    missingCharacterSpacing: Optional[int] = Field(
        None, ge=0, description="Width used for a space without any glyph image"
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        if v and not v.startswith("."):
            return f".{v}"
        return v


class TextLayout(BaseModel):
    """Where and how the name is drawn on the canvas"""

    font: FontSpec = Field(default_factory=FontSpec)
    colour: str = Field(DEFAULT_TEXT_COLOUR, description="Text colour")
    anchorPoint: Tuple[int, int] = Field(..., description="Text centre (x, y)")
    maxWidth: int = Field(0, ge=0, description="Maximum text width, 0 disables")
    customGlyphs: Optional[CustomGlyphStyle] = Field(
        None, description="Optional per-character image style"
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("colour")
    @classmethod
    def validate_colour(cls, v: str) -> str:
        try:
            ImageColor.getrgb(v)
        except ValueError:
            raise ValueError(f"Invalid colour '{v}'")
        return v


class TemplateDefinition(BaseModel):
    """A template entry as stored in templates.json"""

    name: str = Field(..., description="Display name")
    category: str = Field("", description="Grouping shown to users")
    type: str = Field("", description="Template type label")
    variant: int = Field(0, ge=0, description="Variant number within a category")
    imagePath: str = Field(..., description="Base image path, relative to templates dir")
    previewAssetId: Optional[int] = Field(
        None, description="Asset drawn behind the template when previewed"
    )
    text: TextLayout

    model_config = ConfigDict(from_attributes=True)


@dataclass
class Template:
    """A loaded template: definition, decoded base image and preview asset."""

    index: int
    definition: TemplateDefinition
    base_image: Optional[PILImage.Image]
    preview_asset: Optional[Asset] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def layout(self) -> TextLayout:
        return self.definition.text


class TemplateDataResponse(BaseModel):
    """Template definition and preview metadata returned by the HTTP API"""

    index: int
    data: TemplateDefinition
    previewAsset: Optional[AssetSummary] = None

    @classmethod
    def from_template(cls, template: Template) -> "TemplateDataResponse":
        preview = (
            AssetSummary.from_asset(template.preview_asset)
            if template.preview_asset
            else None
        )
        return cls(index=template.index, data=template.definition, previewAsset=preview)
