"""
Services module for the nametag service.

Available Services:
- NametagService: Template lookup, overlay resolution and rendering

Subdirectory Services:
- asset_pipeline: Asset fetching, descriptor indirection, classification and caching
- nametag_pipeline: Template loading and image compositing
- logger: Centralized loguru-backed logging
"""
