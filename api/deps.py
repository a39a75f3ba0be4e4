"""
API Dependencies

Dependency injection for the API.
Provides the runtime configuration and the anchor store.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from core.anchor.store import AnchorStore, JsonAnchorStore
from core.config.runtime import RuntimeConfig

logger = logging.getLogger(__name__)


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from config file, then overlay environment variables.

    Search order for config file:
      1. ./rowproof.yaml
      2. ./.rowproof.yaml
      3. ~/.config/rowproof/config.yaml

    Environment variables ALWAYS override config file values.
    The .env file is loaded automatically by core.config.runtime on import.
    """
    search_paths = [
        Path.cwd() / "rowproof.yaml",
        Path.cwd() / ".rowproof.yaml",
        Path.home() / ".config" / "rowproof" / "config.yaml",
    ]

    config: RuntimeConfig | None = None

    for path in search_paths:
        if not path.exists():
            continue
        config = RuntimeConfig.from_yaml(path)
        logger.info(f"Loaded config from {path}")
        break

    if config is None:
        # No config file found, start with defaults
        config = RuntimeConfig()

    # Always apply environment variable overrides
    return config.with_env_overrides()


def get_runtime_config() -> RuntimeConfig:
    """FastAPI dependency: the effective runtime configuration."""
    return _load_runtime_config()


def get_artifacts_root() -> Path:
    """FastAPI dependency: root directory of committed artifacts."""
    return get_runtime_config().artifacts.root_path


def get_anchor_store() -> Optional[AnchorStore]:
    """
    FastAPI dependency: the configured anchor store.

    Returns None when no anchor records are configured, in which case the
    bundle's own root is the comparison value.
    """
    records_path = get_runtime_config().anchor.records_path
    if not records_path:
        return None
    return JsonAnchorStore(records_path)
