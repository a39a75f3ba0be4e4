"""
Runtime Configuration Module

Provides configuration loading and management for rowproof.
"""

from .runtime import (
    AnchorConfig,
    ArtifactsConfig,
    BuildConfig,
    DatasetConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "AnchorConfig",
    "ArtifactsConfig",
    "BuildConfig",
    "DatasetConfig",
    "RuntimeConfig",
    "get_default_config",
    "set_default_config",
]
