"""Core configuration."""

from .config import Settings, settings, reset_settings

__all__ = ["Settings", "settings", "reset_settings"]
