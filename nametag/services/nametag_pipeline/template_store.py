# nametag/services/nametag_pipeline/template_store.py
"""
Template Store - Loaded nametag templates, ready to render.

Templates are loaded once at startup: every base image is decoded eagerly and
every preview asset is resolved concurrently. A base image that cannot be
loaded aborts startup; a preview that cannot be resolved is logged and left
empty.
"""

import json
from pathlib import Path
from typing import Any, List, Optional, Sequence

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from pydantic import TypeAdapter, ValidationError

from ...enums import LogEmoji, LoggerName, LogSource
from ...exceptions import NoTemplatesError, TemplateLoadError
from ...models.asset_model import Asset
from ...models.template_model import Template, TemplateDefinition
from ..asset_pipeline import AssetResolver
from ..logger import get_service_logger

logger = get_service_logger(
    LoggerName.TEMPLATE_SERVICE, LogSource.SYSTEM, default_emoji=LogEmoji.TEMPLATE
)

_definitions_adapter = TypeAdapter(List[TemplateDefinition])


class TemplateStore:
    """Ordered, read-only collection of loaded templates."""

    def __init__(self, templates: Optional[Sequence[Template]] = None):
        self._templates: List[Template] = list(templates or [])

    @classmethod
    def load(
        cls,
        definitions: Sequence[TemplateDefinition],
        templates_directory: Path,
        resolver: Optional[AssetResolver] = None,
    ) -> "TemplateStore":
        """
        Build a store from template definitions.

        Args:
            definitions: Definitions in display order
            templates_directory: Directory the definitions' image paths are relative to
            resolver: Resolver for preview assets; previews are skipped without one

        Returns:
            Loaded TemplateStore

        Raises:
            TemplateLoadError: If any base image cannot be loaded
        """
        templates_directory = Path(templates_directory)
        base_images = [
            cls._load_base_image(index, definition, templates_directory)
            for index, definition in enumerate(definitions)
        ]

        previews = cls._resolve_previews(definitions, resolver)

        templates = [
            Template(
                index=index,
                definition=definition,
                base_image=base_image,
                preview_asset=preview,
            )
            for index, (definition, base_image, preview) in enumerate(
                zip(definitions, base_images, previews)
            )
        ]

        logger.info(
            f"Loaded {len(templates)} templates",
            extra_context={
                "templates_directory": str(templates_directory),
                "previews": sum(1 for preview in previews if preview is not None),
            },
            emoji=LogEmoji.SUCCESS,
        )
        return cls(templates)

    @classmethod
    def from_file(
        cls,
        templates_file: Path,
        templates_directory: Path,
        resolver: Optional[AssetResolver] = None,
    ) -> "TemplateStore":
        """
        Load templates from a JSON array of definitions.

        Raises:
            TemplateLoadError: If the file is unreadable, invalid, or names a
                base image that cannot be loaded
        """
        return cls.load(read_definitions(templates_file), templates_directory, resolver)

    def get_all(self) -> List[Template]:
        """All templates in display order."""
        return list(self._templates)

    def get_definitions(self) -> List[TemplateDefinition]:
        return [template.definition for template in self._templates]

    def get_by_index(self, index: int) -> Template:
        """
        Get a template, clamping the index into range.

        Raises:
            NoTemplatesError: If the store is empty
        """
        if not self._templates:
            raise NoTemplatesError("No templates are loaded")

        clamped = min(max(index, 0), len(self._templates) - 1)
        return self._templates[clamped]

    def __len__(self) -> int:
        return len(self._templates)

    @staticmethod
    def _load_base_image(
        index: int, definition: TemplateDefinition, templates_directory: Path
    ) -> PILImage.Image:
        image_path = templates_directory / definition.imagePath
        try:
            with PILImage.open(image_path) as image:
                return image.convert("RGBA")
        except (
            UnidentifiedImageError,
            OSError,
            PILImage.DecompressionBombError,
        ) as e:
            logger.error(
                f"Failed to load base image for template {index}",
                exception=e,
                extra_context={"template_index": index, "path": str(image_path)},
            )
            raise TemplateLoadError(
                f"Template {index} ({definition.name}) base image could not be loaded: {e}",
                template_index=index,
            ) from e

    @staticmethod
    def _resolve_previews(
        definitions: Sequence[TemplateDefinition], resolver: Optional[AssetResolver]
    ) -> List[Optional[Asset]]:
        previews: List[Optional[Asset]] = [None] * len(definitions)
        if resolver is None:
            return previews

        wanted = [
            (index, definition.previewAssetId)
            for index, definition in enumerate(definitions)
            if definition.previewAssetId is not None
        ]
        if not wanted:
            return previews

        # resolve_many drops failures, so match results back by id
        resolved = resolver.resolve_many([asset_id for _, asset_id in wanted])
        for index, asset_id in wanted:
            asset = next((a for a in resolved if a.matches(asset_id)), None)
            if asset is None:
                logger.warning(
                    f"Preview asset {asset_id} for template {index} could not be resolved",
                    extra_context={"template_index": index, "asset_id": asset_id},
                )
            previews[index] = asset

        return previews


def read_definitions(templates_file: Path) -> List[TemplateDefinition]:
    """
    Read and validate template definitions from a JSON file.

    Raises:
        TemplateLoadError: If the file cannot be read or fails validation
    """
    templates_file = Path(templates_file)
    try:
        raw: Any = json.loads(templates_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise TemplateLoadError(f"Unable to read templates file {templates_file}: {e}") from e

    try:
        return _definitions_adapter.validate_python(raw)
    except ValidationError as e:
        raise TemplateLoadError(f"Invalid templates file {templates_file}: {e}") from e
