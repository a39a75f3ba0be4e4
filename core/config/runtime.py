"""
Runtime Configuration

Central configuration for dataset sanitizing, batch building, artifact
layout and anchor lookup.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from core.dataset.sanitize import DEFAULT_DROP_COLUMNS

load_dotenv()


ENV_PREFIX = "ROWPROOF_"

DEFAULT_BATCH_SIZE = 1024


@dataclass
class DatasetConfig:
    """Where the raw dataset lives and which columns never leave it."""
    csv_path: str = "data/dataset.csv"
    drop_columns: list[str] = field(default_factory=lambda: sorted(DEFAULT_DROP_COLUMNS))


@dataclass
class BuildConfig:
    """Configuration for batch building."""
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = 1


@dataclass
class ArtifactsConfig:
    """
    Output layout. Everything lives under `root`:

        clean/cleaned.csv, clean/meta.json
        batches/batches.json
        proofs/batch_<id>.json
    """
    root: str = "artifacts"

    @property
    def root_path(self) -> Path:
        return Path(self.root)

    @property
    def clean_csv_path(self) -> Path:
        return self.root_path / "clean" / "cleaned.csv"

    @property
    def meta_path(self) -> Path:
        return self.root_path / "clean" / "meta.json"

    @property
    def index_path(self) -> Path:
        return self.root_path / "batches" / "batches.json"

    @property
    def proofs_dir(self) -> Path:
        return self.root_path / "proofs"


@dataclass
class AnchorConfig:
    """Source of trusted (anchored) batch roots."""
    records_path: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    artifacts: ArtifactsConfig = field(default_factory=ArtifactsConfig)
    anchor: AnchorConfig = field(default_factory=AnchorConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - ROWPROOF_CSV_PATH: Raw dataset CSV
        - ROWPROOF_DROP_COLUMNS: Comma-separated column denylist
        - ROWPROOF_BATCH_SIZE: Rows per batch
        - ROWPROOF_MAX_WORKERS: Parallel batch builders
        - ROWPROOF_ARTIFACTS_DIR: Artifact root directory
        - ROWPROOF_ANCHORS_PATH: JSON file of anchor records
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}CSV_PATH"):
            overrides.setdefault("dataset", {})["csv_path"] = os.getenv(f"{ENV_PREFIX}CSV_PATH")
        if os.getenv(f"{ENV_PREFIX}DROP_COLUMNS") is not None:
            raw = os.getenv(f"{ENV_PREFIX}DROP_COLUMNS", "")
            overrides.setdefault("dataset", {})["drop_columns"] = [
                c.strip() for c in raw.split(",") if c.strip()
            ]

        if os.getenv(f"{ENV_PREFIX}BATCH_SIZE"):
            overrides.setdefault("build", {})["batch_size"] = int(
                os.getenv(f"{ENV_PREFIX}BATCH_SIZE", str(DEFAULT_BATCH_SIZE))
            )
        if os.getenv(f"{ENV_PREFIX}MAX_WORKERS"):
            overrides.setdefault("build", {})["max_workers"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_WORKERS", "1")
            )

        if os.getenv(f"{ENV_PREFIX}ARTIFACTS_DIR"):
            overrides.setdefault("artifacts", {})["root"] = os.getenv(f"{ENV_PREFIX}ARTIFACTS_DIR")

        if os.getenv(f"{ENV_PREFIX}ANCHORS_PATH"):
            overrides.setdefault("anchor", {})["records_path"] = os.getenv(f"{ENV_PREFIX}ANCHORS_PATH")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        dataset_data = data.get("dataset", {})
        build_data = data.get("build", {})
        artifacts_data = data.get("artifacts", {})
        anchor_data = data.get("anchor", {})

        dataset = DatasetConfig(**dataset_data) if dataset_data else DatasetConfig()
        build = BuildConfig(**build_data) if build_data else BuildConfig()
        artifacts = ArtifactsConfig(**artifacts_data) if artifacts_data else ArtifactsConfig()
        anchor = AnchorConfig(**anchor_data) if anchor_data else AnchorConfig()

        return cls(
            dataset=dataset,
            build=build,
            artifacts=artifacts,
            anchor=anchor,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "dataset": {
                "csv_path": self.dataset.csv_path,
                "drop_columns": list(self.dataset.drop_columns),
            },
            "build": {
                "batch_size": self.build.batch_size,
                "max_workers": self.build.max_workers,
            },
            "artifacts": {
                "root": self.artifacts.root,
            },
            "anchor": {
                "records_path": self.anchor.records_path,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
