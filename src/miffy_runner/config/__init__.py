"""Configuration for Miffy Runner."""

from .settings import SEASONS, Settings, get_settings, load_settings

__all__ = ["SEASONS", "Settings", "get_settings", "load_settings"]
