# nametag/exceptions.py
"""
Custom exceptions for the nametag service.

Centralized location for all custom exception classes to avoid
duplicating exception definitions across modules.
"""

from typing import Optional


class NametagError(Exception):
    """Base exception for all nametag-specific errors."""

    pass


class ResolutionError(NametagError):
    """An external asset id could not be resolved into an image."""

    def __init__(self, message: str, asset_id: Optional[int] = None):
        super().__init__(message)
        self.asset_id = asset_id


class NetworkError(ResolutionError):
    """Fetch timed out, failed to connect or returned a non-success status."""

    pass


class MalformedDescriptorError(ResolutionError):
    """Indirection XML is unparsable or lacks the content URL field."""

    pass


class UnresolvableContentError(ResolutionError):
    """Content never resolved to an image, even after following indirection."""

    pass


class NoTemplatesError(NametagError):
    """The template store holds no templates."""

    pass


class TemplateLoadError(NametagError):
    """A template's base image could not be loaded at startup."""

    def __init__(self, message: str, template_index: Optional[int] = None):
        super().__init__(message)
        self.template_index = template_index
