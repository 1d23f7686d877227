"""Configuration module."""
from .settings import AppSettings, get_settings, use_settings, reset_settings

__all__ = ["AppSettings", "get_settings", "use_settings", "reset_settings"]
