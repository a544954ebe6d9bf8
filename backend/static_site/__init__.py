"""
Static Site Module

Serves the bundled web client with case-insensitive path matching.
"""

from .resolver import CaseInsensitiveResources
from .routes import router as static_router

__all__ = ["CaseInsensitiveResources", "static_router"]
