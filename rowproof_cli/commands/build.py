"""
CLI Build Command

Sanitize a raw CSV, partition it into batches, build a Merkle tree per batch
and commit the proof bundles.

Usage:
    rowproof build --csv data/dataset.csv [--batch-size N] [--out DIR] [--workers N] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from orchestrator.pipeline import BuildPipeline, BuildResult, PipelineConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0


def print_summary_human(result: BuildResult) -> None:
    """Print build summary in human-readable format."""
    print(f"file_hash: {result.file_hash}")
    print(f"rows: {result.row_count}")
    print(f"batch_size: {result.batch_size}")
    print(f"batches: {len(result.batches)}")
    print(f"artifacts: {result.artifacts_root}")
    for meta in result.batches[:20]:
        print(f"  [{meta.batch_id}] rows {meta.start_row}..{meta.end_row - 1} root {meta.root}")
    if len(result.batches) > 20:
        print(f"  ... {len(result.batches) - 20} more")


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config

    csv_path = args.csv or config.csv_path
    out_dir = args.out or config.artifacts_dir
    drop_columns = args.drop_columns if args.drop_columns is not None else config.drop_columns

    pipeline_config = PipelineConfig(
        batch_size=args.batch_size if args.batch_size is not None else config.batch_size,
        max_workers=args.workers if args.workers is not None else config.max_workers,
        drop_columns=frozenset(drop_columns),
    )

    logger.info(f"Building commitments for {csv_path} into {out_dir}")
    result = BuildPipeline(pipeline_config).run(csv_path, out_dir)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_summary_human(result)

    return EXIT_SUCCESS
