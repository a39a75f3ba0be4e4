"""
Rowproof CLI

Command-line interface for building and verifying row commitments.

Usage:
    python -m rowproof_cli build --csv data/dataset.csv --out artifacts
    python -m rowproof_cli verify --batch 0 --row 3
    python -m rowproof_cli check --batch 0
    python -m rowproof_cli config --init
"""

__version__ = "0.1.0"
