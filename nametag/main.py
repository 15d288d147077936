# nametag/main.py
"""
FastAPI application entry point for the nametag service.

The lifespan builds every long-lived object exactly once (asset cache, fetcher,
resolver, template store, compositor and service) and holds the service on
``app.state`` for the dependency getter.
"""

from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .enums import LogEmoji, LoggerName, LogSource
from .middleware import ErrorHandlerMiddleware, RequestLoggerMiddleware
from .routers import nametag_routers as nametag
from .services.asset_pipeline import AssetCache, AssetResolver, ContentFetcher
from .services.logger import get_service_logger, initialize_global_logger
from .services.nametag_pipeline import Compositor, TemplateStore
from .services.nametag_pipeline.utils import FontCache, GlyphCache
from .services.nametag_service import NametagService

logger: Any = None


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle application startup and shutdown"""
    logger_service = initialize_global_logger(
        level=settings.log_level,
        log_file=settings.log_file,
        enable_console=True,
        enable_file_logging=settings.log_file is not None,
    )
    _app.state.logger_service = logger_service

    global logger
    logger = get_service_logger(LoggerName.SYSTEM, LogSource.SYSTEM)

    logger.info(
        "Starting nametag service",
        extra_context={
            "operation": "application_startup",
            "environment": settings.environment,
            "api_host": settings.api_host,
            "api_port": settings.api_port,
            "resources_directory": settings.resources_directory,
        },
        emoji=LogEmoji.STARTUP,
    )

    asset_cache = AssetCache()
    fetcher = ContentFetcher(
        delivery_url=settings.asset_delivery_url,
        timeout=settings.asset_fetch_timeout,
    )
    resolver = AssetResolver(
        asset_cache, fetcher, max_concurrent_fetches=settings.max_concurrent_fetches
    )

    # A base image that fails to load aborts startup
    template_store = TemplateStore.from_file(
        settings.templates_file, settings.templates_directory, resolver
    )

    compositor = Compositor(
        font_cache=FontCache(settings.fonts_directory),
        glyph_cache=GlyphCache(),
        resources_path=settings.resources_path,
    )

    _app.state.nametag_service = NametagService(template_store, resolver, compositor)

    logger.info(
        f"Nametag service ready with {len(template_store)} templates",
        extra_context={
            "operation": "application_startup",
            "templates": len(template_store),
            "cached_assets": len(asset_cache),
        },
        emoji=LogEmoji.SUCCESS,
    )

    yield

    stats = asset_cache.get_stats()
    logger.info(
        "Shutting down nametag service",
        extra_context={
            "operation": "application_shutdown",
            "cached_assets": stats.entries,
            "cache_hit_ratio": round(stats.hit_ratio, 2),
        },
        emoji=LogEmoji.SHUTDOWN,
    )
    logger_service.shutdown()


app = FastAPI(
    title="Nametag API",
    description="Renders nametag images from templates and external assets",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add middleware stack (order matters: last added = first executed)
# 1. Error handling (outermost - catches all errors)
app.add_middleware(ErrorHandlerMiddleware)

# 2. Request logging
app.add_middleware(RequestLoggerMiddleware)

# 3. CORS middleware (innermost)
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.cors_origin_regex,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(nametag.router)


def run() -> None:
    """Start the API server with the configured host and port."""
    uvicorn.run(
        "nametag.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    run()
