"""
Configuration management for Karu.

Handles loading and merging configuration from multiple sources:
- Default settings
- User config file (~/.config/karu/config.yaml)
- Environment variables

Modified: 2025-11-12
"""

from karu.config.settings import (
    Settings,
    BrowserSettings,
    PreviewSettings,
    LoggingSettings,
    get_config_dir,
    get_cache_dir,
)

__all__ = [
    "Settings",
    "BrowserSettings",
    "PreviewSettings",
    "LoggingSettings",
    "get_config_dir",
    "get_cache_dir",
]
