"""
Nametag service: renders nametag images from templates, external assets and text.
"""

__version__ = "1.0.0"
