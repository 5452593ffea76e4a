"""Configuration package for colmapper."""

from colmapper.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
