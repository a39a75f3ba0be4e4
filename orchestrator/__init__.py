"""
Build orchestration.

Deterministic, in-process pipeline that sanitizes a dataset, partitions it
into batches, builds one Merkle tree per batch and commits proof bundles.

Public API:
- BuildPipeline: Main pipeline runner class
- PipelineConfig: Configuration for a build run
- BuildResult: Outcome of a build run
- build_batch: Build one batch's proof bundle in memory
- verify_row / verify_record / verify_bundle: Verification flows
"""

from orchestrator.pipeline import (
    BuildPipeline,
    BuildResult,
    PipelineConfig,
    build_batch,
    build_index,
    create_pipeline,
    hash_rows,
)
from orchestrator.artifacts import (
    VerifyRowResult,
    verify_bundle,
    verify_entry,
    verify_record,
    verify_row,
)


__all__ = [
    # Main pipeline
    "BuildPipeline",
    "PipelineConfig",
    "BuildResult",
    "build_batch",
    "build_index",
    "hash_rows",
    "create_pipeline",
    # Verification
    "VerifyRowResult",
    "verify_bundle",
    "verify_entry",
    "verify_record",
    "verify_row",
]
