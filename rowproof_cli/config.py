"""
CLI Configuration

Configuration management for the rowproof CLI.
Supports environment variables and configuration files.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from core.config.runtime import (
    DEFAULT_BATCH_SIZE,
    AnchorConfig,
    ArtifactsConfig,
    BuildConfig,
    DatasetConfig,
    RuntimeConfig,
)
from core.dataset.sanitize import DEFAULT_DROP_COLUMNS


# Environment variable prefix
ENV_PREFIX = "ROWPROOF_"


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Dataset
    csv_path: str = "data/dataset.csv"
    drop_columns: list[str] = field(default_factory=lambda: sorted(DEFAULT_DROP_COLUMNS))

    # Build settings
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = 1

    # Locations
    artifacts_dir: str = "artifacts"
    anchors_path: str | None = None

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    def to_runtime(self) -> RuntimeConfig:
        """The equivalent core RuntimeConfig."""
        return RuntimeConfig(
            dataset=DatasetConfig(csv_path=self.csv_path, drop_columns=list(self.drop_columns)),
            build=BuildConfig(batch_size=self.batch_size, max_workers=self.max_workers),
            artifacts=ArtifactsConfig(root=self.artifacts_dir),
            anchor=AnchorConfig(records_path=self.anchors_path),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "csv_path": self.csv_path,
            "drop_columns": list(self.drop_columns),
            "batch_size": self.batch_size,
            "max_workers": self.max_workers,
            "artifacts_dir": self.artifacts_dir,
            "anchors_path": self.anchors_path,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables."""
    config = CLIConfig()

    if os.getenv(f"{ENV_PREFIX}CSV_PATH"):
        config.csv_path = os.getenv(f"{ENV_PREFIX}CSV_PATH", config.csv_path)
    if os.getenv(f"{ENV_PREFIX}DROP_COLUMNS") is not None:
        raw = os.getenv(f"{ENV_PREFIX}DROP_COLUMNS", "")
        config.drop_columns = [c.strip() for c in raw.split(",") if c.strip()]

    if os.getenv(f"{ENV_PREFIX}BATCH_SIZE"):
        config.batch_size = int(os.getenv(f"{ENV_PREFIX}BATCH_SIZE", str(DEFAULT_BATCH_SIZE)))
    if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
        config.max_workers = int(os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "1"))

    if os.getenv(f"{ENV_PREFIX}ARTIFACTS_DIR"):
        config.artifacts_dir = os.getenv(f"{ENV_PREFIX}ARTIFACTS_DIR", config.artifacts_dir)
    config.anchors_path = os.getenv(f"{ENV_PREFIX}ANCHORS_PATH")

    # Logging
    config.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO")
    config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")

    return config


def load_config_from_file(path: Path) -> CLIConfig:
    """Load configuration from a JSON file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    config = CLIConfig()

    config.csv_path = data.get("csv_path", config.csv_path)
    config.drop_columns = list(data.get("drop_columns", config.drop_columns))

    config.batch_size = data.get("batch_size", config.batch_size)
    config.max_workers = data.get("max_workers", config.max_workers)

    config.artifacts_dir = data.get("artifacts_dir", config.artifacts_dir)
    config.anchors_path = data.get("anchors_path", config.anchors_path)

    # Logging
    config.log_level = data.get("log_level", config.log_level)
    config.log_file = data.get("log_file", config.log_file)
    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    # Start with defaults
    config = CLIConfig()

    # Load from file if provided
    if config_path and config_path.exists():
        config = load_config_from_file(config_path)

    # Check for default config locations
    default_paths = [
        Path.cwd() / "rowproof.json",
        Path.cwd() / ".rowproof.json",
        Path.home() / ".config" / "rowproof" / "config.json",
    ]

    if config_path is None:
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    # Override with environment variables
    env_config = load_config_from_env()

    # Merge env into config (env takes precedence)
    if os.getenv(f"{ENV_PREFIX}CSV_PATH"):
        config.csv_path = env_config.csv_path
    if os.getenv(f"{ENV_PREFIX}DROP_COLUMNS") is not None:
        config.drop_columns = env_config.drop_columns
    if os.getenv(f"{ENV_PREFIX}BATCH_SIZE"):
        config.batch_size = env_config.batch_size
    if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
        config.max_workers = env_config.max_workers
    if os.getenv(f"{ENV_PREFIX}ARTIFACTS_DIR"):
        config.artifacts_dir = env_config.artifacts_dir
    if os.getenv(f"{ENV_PREFIX}ANCHORS_PATH"):
        config.anchors_path = env_config.anchors_path
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = env_config.log_level
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = env_config.log_file

    return config


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
