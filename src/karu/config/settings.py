"""
Configuration management for Karu.

Hierarchical settings loading: defaults → config file → environment variables

Modified: 2025-11-12
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Dict, Any, Optional

from karu.core.exceptions import ConfigurationError


@dataclass
class BrowserSettings:
    """Browser behavior settings."""

    show_hidden: bool = True
    start_path: Optional[str] = None  # None: process working directory
    tick_interval: float = 0.25  # seconds between playback polls


@dataclass
class PreviewSettings:
    """Preview pane settings."""

    max_size_mb: int = 300
    blocked_names: List[str] = field(default_factory=lambda: [".wget-hsts"])
    sniff_bytes: int = 1024  # leading bytes checked for NUL


@dataclass
class LoggingSettings:
    """Log file settings (the terminal belongs to the TUI)."""

    level: str = "WARNING"
    file: str = "~/.cache/karu/karu.log"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Main settings container."""

    browser: BrowserSettings = field(default_factory=BrowserSettings)
    preview: PreviewSettings = field(default_factory=PreviewSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """
        Load settings from file and environment variables.

        Priority:
        1. Default values (defined in dataclasses)
        2. Config file (~/.config/karu/config.yaml)
        3. Environment variables (override everything)

        Args:
            config_path: Optional path to config file

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If the config file is not valid YAML
        """
        settings = cls()

        # Load from config file
        if config_path is None:
            config_dir = Path.home() / ".config" / "karu"
            config_path = config_dir / "config.yaml"

        if config_path.exists():
            try:
                with open(config_path) as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

            if not isinstance(config_data, dict):
                raise ConfigurationError(f"Config file {config_path} must contain a mapping")

            # Browser settings
            if "browser" in config_data:
                browser = config_data["browser"]
                settings.browser = BrowserSettings(
                    show_hidden=browser.get("show_hidden", True),
                    start_path=browser.get("start_path"),
                    tick_interval=browser.get("tick_interval", 0.25),
                )

            # Preview settings
            if "preview" in config_data:
                preview = config_data["preview"]
                settings.preview = PreviewSettings(
                    max_size_mb=preview.get("max_size_mb", 300),
                    blocked_names=preview.get("blocked_names", [".wget-hsts"]),
                    sniff_bytes=preview.get("sniff_bytes", 1024),
                )

            # Logging settings
            if "logging" in config_data:
                log = config_data["logging"]
                settings.logging = LoggingSettings(
                    level=log.get("level", "WARNING"),
                    file=log.get("file", "~/.cache/karu/karu.log"),
                )

        # Override with environment variables
        show_hidden_env = os.getenv("KARU_SHOW_HIDDEN")
        if show_hidden_env:
            settings.browser.show_hidden = _parse_bool(show_hidden_env)

        log_level_env = os.getenv("KARU_LOG_LEVEL")
        if log_level_env:
            settings.logging.level = log_level_env.upper()

        log_file_env = os.getenv("KARU_LOG_FILE")
        if log_file_env:
            settings.logging.file = log_file_env

        return settings

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            "browser": {
                "show_hidden": self.browser.show_hidden,
                "start_path": self.browser.start_path,
                "tick_interval": self.browser.tick_interval,
            },
            "preview": {
                "max_size_mb": self.preview.max_size_mb,
                "blocked_names": list(self.preview.blocked_names),
                "sniff_bytes": self.preview.sniff_bytes,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


def get_config_dir() -> Path:
    """Get configuration directory, creating if needed."""
    config_dir = Path.home() / ".config" / "karu"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_cache_dir() -> Path:
    """Get cache directory, creating if needed."""
    cache_dir = Path.home() / ".cache" / "karu"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir
