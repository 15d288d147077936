"""
Nametag Pipeline Module

Template loading and image compositing for nametag rendering.
"""

from .compositor import Compositor
from .template_store import TemplateStore, read_definitions

__all__ = [
    "Compositor",
    "TemplateStore",
    "read_definitions",
]
