# nametag/services/nametag_service.py
"""
Nametag Service - Turns a template index, a name and overlay ids into a PNG.

Overlay ids are resolved concurrently through the asset resolver; ids that fail
to resolve are dropped so one bad asset never fails a render.
"""

from typing import List, Optional, Sequence

from ..enums import LogEmoji, LoggerName, LogSource
from ..models.asset_model import Asset
from ..models.template_model import Template, TemplateDefinition
from .asset_pipeline import AssetResolver
from .logger import get_service_logger
from .nametag_pipeline import Compositor, TemplateStore

logger = get_service_logger(
    LoggerName.NAMETAG_SERVICE, LogSource.SYSTEM, default_emoji=LogEmoji.PROCESSING
)


class NametagService:
    """
    Orchestrates template lookup, overlay resolution and compositing.

    All methods are blocking; async callers run them in an executor.
    """

    def __init__(
        self,
        template_store: TemplateStore,
        resolver: AssetResolver,
        compositor: Optional[Compositor] = None,
    ):
        self.template_store = template_store
        self.resolver = resolver
        self.compositor = compositor or Compositor()

    def create_nametag(
        self,
        name: str,
        index: int = 0,
        preview: bool = False,
        asset_ids: Optional[Sequence[int]] = None,
    ) -> bytes:
        """
        Render a nametag.

        Args:
            name: Name to draw
            index: Template index, clamped into range
            preview: Draw the template's preview asset beneath everything else
            asset_ids: Overlay asset ids, drawn in the order given

        Returns:
            Encoded PNG bytes

        Raises:
            NoTemplatesError: If no templates are loaded
        """
        template = self.template_store.get_by_index(index)
        overlays = self._collect_overlays(template, preview, asset_ids or [])

        logger.debug(
            f"Rendering nametag with template {template.index}",
            extra_context={
                "template_index": template.index,
                "preview": preview,
                "overlays": len(overlays),
            },
        )
        return self.compositor.render(template, name, overlays)

    def get_templates(self) -> List[TemplateDefinition]:
        return self.template_store.get_definitions()

    def get_template(self, index: int) -> Template:
        """Get a template by index, clamped into range."""
        return self.template_store.get_by_index(index)

    def _collect_overlays(
        self, template: Template, preview: bool, asset_ids: Sequence[int]
    ) -> List[Asset]:
        overlays: List[Asset] = []

        if preview:
            if template.preview_asset is not None:
                overlays.append(template.preview_asset)
            else:
                logger.debug(
                    f"Template {template.index} has no preview asset",
                    extra_context={"template_index": template.index},
                )

        if asset_ids:
            overlays.extend(self.resolver.resolve_many(asset_ids))

        return overlays
