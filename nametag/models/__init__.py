from .asset_model import Asset, AssetDescriptor, AssetSummary
from .template_model import (
    CustomGlyphStyle,
    FontSpec,
    Template,
    TemplateDataResponse,
    TemplateDefinition,
    TextLayout,
)

__all__ = [
    "Asset",
    "AssetDescriptor",
    "AssetSummary",
    "CustomGlyphStyle",
    "FontSpec",
    "Template",
    "TemplateDataResponse",
    "TemplateDefinition",
    "TextLayout",
]
