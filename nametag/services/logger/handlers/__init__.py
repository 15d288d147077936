"""
Logger handlers for the nametag logging system.
"""

from .console_handler import ConsoleHandler
from .file_handler import FileHandler

__all__ = [
    "ConsoleHandler",
    "FileHandler",
]
