"""
CLI Verify Command

Verify one row's inclusion proof offline. The trusted root comes from an
anchor records file when given, otherwise from the bundle itself.

Usage:
    rowproof verify --batch 0 --row 3 [--out DIR] [--anchors PATH] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from core.anchor.store import JsonAnchorStore
from orchestrator.artifacts.io import bundle_path
from orchestrator.artifacts.pack import VerifyRowResult, verify_row


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def print_result_human(result: VerifyRowResult) -> None:
    """Print result in human-readable format."""
    print(f"batch: {result.batch_id}")
    print(f"row: {result.row_offset}")
    print(f"leaf: {result.leaf}")
    print(f"root: {result.root} ({result.root_source})")
    print(f"ok: {str(result.ok).lower()}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (2 if the proof does not reproduce the trusted root)
    """
    config = args.cli_config

    out_dir = args.out or config.artifacts_dir
    anchors_path = args.anchors or config.anchors_path

    anchor_store = JsonAnchorStore(anchors_path) if anchors_path else None
    proof_file = bundle_path(out_dir, args.batch)

    result = verify_row(proof_file, args.row, anchor_store=anchor_store)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_result_human(result)

    if result.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
