# nametag/routers/nametag_routers.py
"""
Nametag HTTP endpoints.

Role: Template listing and nametag image rendering over HTTP
Responsibilities: Parameter parsing, response headers, request logging
Interactions: Uses NametagService for all rendering; rendering is blocking and
             runs in the event loop's default executor
"""
# NOTE: THIS FILE SHOULD NOT CONTAIN ANY BUSINESS LOGIC.

import asyncio
from functools import partial
from typing import List, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from ..dependencies import NametagServiceDep
from ..enums import LogEmoji, LoggerName, LogSource
from ..models.template_model import TemplateDataResponse, TemplateDefinition
from ..services.logger import get_service_logger
from ..services.nametag_service import NametagService
from ..utils.query_helpers import collect_asset_ids
from ..utils.router_helpers import create_image_response, handle_exceptions

logger = get_service_logger(LoggerName.NAMETAG_ROUTER, LogSource.API)

router = APIRouter(tags=["nametag"])


async def _render(
    service: NametagService,
    name: str,
    index: int = 0,
    preview: bool = False,
    asset_ids: Optional[List[int]] = None,
) -> bytes:
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(
        None,
        partial(service.create_nametag, name, index, preview, asset_ids or []),
    )


def _log_render(request: Request, name: str, index: int, asset_ids: List[int]) -> None:
    logger.info(
        f"Rendered nametag '{name}' with template {index}",
        extra_context={
            "name": name,
            "index": index,
            "assetIDs": asset_ids,
            "path": str(request.url.path)
            + (f"?{request.url.query}" if request.url.query else ""),
            "ip": getattr(request.client, "host", "unknown"),
        },
        emoji=LogEmoji.IMAGE,
    )


# ====================================================================
# TEMPLATE ENDPOINTS
# ====================================================================


@router.get("/nametag/options", response_model=List[TemplateDefinition])
@handle_exceptions("list nametag templates")
async def get_nametag_options(nametag_service: NametagServiceDep):
    """List every template definition in display order."""
    return nametag_service.get_templates()


@router.get("/nametag/data/{index}", response_model=TemplateDataResponse)
@handle_exceptions("get nametag template data")
async def get_nametag_data(index: int, nametag_service: NametagServiceDep):
    """Get a template definition and its preview asset metadata (index is clamped)."""
    template = nametag_service.get_template(index)
    return TemplateDataResponse.from_template(template)


# ====================================================================
# RENDER ENDPOINTS
# ====================================================================


@router.get("/nametag/create/{index}/{name}", response_class=Response)
@handle_exceptions("create nametag")
async def create_nametag(
    request: Request,
    index: int,
    name: str,
    nametag_service: NametagServiceDep,
    assetId: List[int] = Query(default=[], description="Overlay asset id, repeatable"),
    tShirtIDs: Optional[str] = Query(
        default=None, description="Legacy JSON array of overlay asset ids"
    ),
):
    """Render a nametag with overlay assets."""
    asset_ids = collect_asset_ids(assetId, tShirtIDs)
    image = await _render(nametag_service, name, index, False, asset_ids)
    response = create_image_response(image)
    _log_render(request, name, index, asset_ids)
    return response


@router.get("/nametag/preview/{index}/{name}", response_class=Response)
@handle_exceptions("preview nametag")
async def preview_nametag(
    request: Request,
    index: int,
    name: str,
    nametag_service: NametagServiceDep,
    assetId: List[int] = Query(default=[], description="Overlay asset id, repeatable"),
    tShirtIDs: Optional[str] = Query(
        default=None, description="Legacy JSON array of overlay asset ids"
    ),
):
    """Render a nametag over the template's preview asset, then any overlays."""
    asset_ids = collect_asset_ids(assetId, tShirtIDs)
    image = await _render(nametag_service, name, index, True, asset_ids)
    response = create_image_response(image)
    _log_render(request, name, index, asset_ids)
    return response


# Declared last so the fixed paths above take precedence
@router.get("/nametag/{name}", response_class=Response)
@handle_exceptions("create nametag")
async def get_nametag(name: str, nametag_service: NametagServiceDep):
    """Render a nametag with the first template and no overlays."""
    image = await _render(nametag_service, name)
    return create_image_response(image)
