"""
CLI command modules.
"""

from rowproof_cli.commands import build, check, verify

__all__ = ["build", "check", "verify"]
