"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m rowproof_cli build --csv PATH [--batch-size N] [--out DIR] [--workers N] [--json]
    python -m rowproof_cli verify --batch ID --row OFFSET [--out DIR] [--anchors PATH] [--json]
    python -m rowproof_cli check --batch ID [--out DIR] [--json]
    python -m rowproof_cli config --init

Environment Variables:
    ROWPROOF_CSV_PATH           Raw dataset CSV
    ROWPROOF_DROP_COLUMNS       Comma-separated column denylist
    ROWPROOF_BATCH_SIZE         Rows per batch (default: 1024)
    ROWPROOF_MAX_WORKERS        Parallel batch builders (default: 1)
    ROWPROOF_ARTIFACTS_DIR      Artifact root directory (default: artifacts)
    ROWPROOF_ANCHORS_PATH       JSON file of anchor records
    ROWPROOF_LOG_LEVEL          Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.schemas.errors import RowproofException
from rowproof_cli import __version__
from rowproof_cli.commands import build, check, verify
from rowproof_cli.config import load_config, get_default_config_template


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="rowproof",
        description="Rowproof CLI - Commit CSV rows to per-batch Merkle roots and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./rowproof.json or ~/.config/rowproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Sanitize a CSV and build per-batch proof bundles",
        description="Run the build pipeline and commit artifacts atomically.",
    )
    build_parser.add_argument(
        "--csv",
        type=str,
        default=None,
        help="Raw dataset CSV (default: from config)",
    )
    build_parser.add_argument(
        "--batch-size", "-b",
        type=int,
        default=None,
        help="Rows per batch (default: from config or 1024)",
    )
    build_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Artifact root directory (default: from config or ./artifacts)",
    )
    build_parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Parallel batch builders (default: from config or 1)",
    )
    build_parser.add_argument(
        "--drop-column",
        dest="drop_columns",
        action="append",
        default=None,
        help="Column to remove before hashing (repeatable; replaces the configured list)",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify one row's inclusion proof",
        description="Recompute a row's root from its stored proof and compare with the trusted root.",
    )
    verify_parser.add_argument(
        "--batch",
        type=int,
        required=True,
        help="Batch id",
    )
    verify_parser.add_argument(
        "--row",
        type=int,
        required=True,
        help="Row offset within the batch",
    )
    verify_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Artifact root directory (default: from config or ./artifacts)",
    )
    verify_parser.add_argument(
        "--anchors",
        type=str,
        default=None,
        help="JSON file of anchor records; the bundle root is used if omitted",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on error",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Self-check a whole proof bundle",
        description="Rebuild a batch root from its leaves and verify every stored proof.",
    )
    check_parser.add_argument(
        "--batch",
        type=int,
        required=True,
        help="Batch id",
    )
    check_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Artifact root directory (default: from config or ./artifacts)",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    check_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Include detailed checks in output",
    )
    check_parser.set_defaults(func=check.check_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="rowproof.json",
        help="Path for config file (default: rowproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ROWPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = load_config(Path(args.path) if args.path else None)
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: rowproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except RowproofException as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error [{e.code}]: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
