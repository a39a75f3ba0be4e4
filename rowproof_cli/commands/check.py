"""
CLI Check Command

Self-check a whole proof bundle: leaf counts, root rebuild and every
stored proof.

Usage:
    rowproof check --batch 0 [--out DIR] [--json] [--debug]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from core.schemas.verification import VerificationResult
from orchestrator.artifacts.io import bundle_path, load_bundle
from orchestrator.artifacts.pack import verify_bundle


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class CheckSummary:
    """Summary of a bundle check for CLI output."""
    bundle_path: str = ""
    batch_id: int = 0
    root: str = ""
    ok: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["checks"]:
            del d["checks"]
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(path: str, batch_id: int, root: str, result: VerificationResult, debug: bool = False) -> CheckSummary:
    """Build a CheckSummary from a verification result."""
    summary = CheckSummary(bundle_path=path, batch_id=batch_id, root=root, ok=result.ok)

    for check in result.get_failed_checks():
        summary.errors.append(check.message)

    if debug:
        summary.checks = [
            {"check_id": c.check_id, "ok": c.ok, "message": c.message, "details": c.details}
            for c in result.checks
        ]

    return summary


def print_summary_human(summary: CheckSummary) -> None:
    """Print summary in human-readable format."""
    print(f"bundle: {summary.bundle_path}")
    print(f"batch: {summary.batch_id}")
    print(f"root: {summary.root}")
    print(f"ok: {str(summary.ok).lower()}")

    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors[:10]:
            print(f"  ✗ {err}")

    if summary.checks:
        passed = sum(1 for c in summary.checks if c["ok"])
        print(f"\nchecks: {passed} passed, {len(summary.checks) - passed} failed")
        for check in summary.checks:
            status = "✓" if check["ok"] else "✗"
            print(f"  {status} {check['check_id']}")


def check_cmd(args: Namespace) -> int:
    """
    Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config
    path = bundle_path(args.out or config.artifacts_dir, args.batch)

    bundle = load_bundle(path)
    result = verify_bundle(bundle)

    summary = build_summary(str(path), bundle.batch.batch_id, bundle.batch.root, result, debug=args.debug)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.ok:
        logger.info("Bundle check passed")
        return EXIT_SUCCESS

    logger.warning("Bundle check failed")
    return EXIT_VERIFICATION_FAILED
