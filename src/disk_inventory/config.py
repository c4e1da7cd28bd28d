"""Configuration management for disk inventory scans."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .walker import DEFAULT_BATCH_SIZE


def parse_bool(value: Any, default: bool) -> bool:
    """Interpret a YAML or string value as a boolean.

    Args:
        value: Raw value (bool, int, str or None).
        default: Returned when ``value`` is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in {"true", "yes", "on", "1"}


def _expand(path: str | os.PathLike[str]) -> Path:
    return Path(os.path.expanduser(path))


@dataclass
class InventoryConfig:
    """Configuration for the disk inventory scanner."""

    # Directories scanned when none are given on the command line
    roots: list[Path] = field(default_factory=lambda: [Path.home()])

    # Worker threads per traversal (None = executor default)
    max_workers: int | None = None

    # Directory entries handed to a worker per task
    batch_size: int = DEFAULT_BATCH_SIZE

    # Protection of system/program directories
    protect_system_paths: bool = True
    extra_protected_paths: list[Path] = field(default_factory=list)

    # Display
    poll_interval: float = 0.25  # seconds between progress refreshes
    top_folders: int = 20

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / ".config/disk-inventory/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> InventoryConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        Raises:
            ValueError: If the file contains invalid values.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            msg = f"Invalid config file {config_path}: expected a mapping"
            raise ValueError(msg)

        config = cls._from_dict(data)
        config.validate()
        return config

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> InventoryConfig:
        """Create config from dictionary."""
        config = cls()

        if "roots" in data:
            config.roots = [_expand(p) for p in data["roots"] or []]

        # Scan settings
        if "scan" in data:
            scan = data["scan"] or {}
            if scan.get("max_workers") is not None:
                config.max_workers = int(scan["max_workers"])
            if "batch_size" in scan:
                config.batch_size = int(scan["batch_size"])

        # Protected locations
        if "protection" in data:
            protection = data["protection"] or {}
            config.protect_system_paths = parse_bool(
                protection.get("system_paths"), config.protect_system_paths
            )
            if "extra_paths" in protection:
                config.extra_protected_paths = [_expand(p) for p in protection["extra_paths"] or []]

        # Display
        if "display" in data:
            display = data["display"] or {}
            if "poll_interval" in display:
                config.poll_interval = float(display["poll_interval"])
            if "top_folders" in display:
                config.top_folders = int(display["top_folders"])

        # Logging
        if "logging" in data:
            logging_cfg = data["logging"] or {}
            if logging_cfg.get("file"):
                config.log_file = _expand(logging_cfg["file"])
            if "level" in logging_cfg:
                config.log_level = str(logging_cfg["level"]).upper()

        return config

    def validate(self) -> None:
        """Check that values are usable.

        Raises:
            ValueError: If any value is out of range.

        """
        if not isinstance(logging.getLevelName(self.log_level), int):
            msg = f"Invalid log_level: {self.log_level!r}"
            raise ValueError(msg)
        if self.batch_size < 1:
            msg = f"batch_size must be at least 1, got {self.batch_size}"
            raise ValueError(msg)
        if self.max_workers is not None and self.max_workers < 1:
            msg = f"max_workers must be at least 1, got {self.max_workers}"
            raise ValueError(msg)
        if self.poll_interval <= 0:
            msg = f"poll_interval must be positive, got {self.poll_interval}"
            raise ValueError(msg)

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "roots": [str(p) for p in self.roots],
            "scan": {
                "max_workers": self.max_workers,
                "batch_size": self.batch_size,
            },
            "protection": {
                "system_paths": self.protect_system_paths,
                "extra_paths": [str(p) for p in self.extra_protected_paths],
            },
            "display": {
                "poll_interval": self.poll_interval,
                "top_folders": self.top_folders,
            },
            "logging": {
                "file": str(self.log_file) if self.log_file else None,
                "level": self.log_level,
            },
        }

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
