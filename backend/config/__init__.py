"""
Configuration package.

Settings are read once at startup and passed explicitly to the pieces
that need them.
"""

from .settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
