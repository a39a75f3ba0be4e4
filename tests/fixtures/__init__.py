"""
Test fixtures package for rowproof tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_bundle, write_sample_csv

    def test_something(tmp_path):
        csv_path = write_sample_csv(tmp_path / "dataset.csv", count=7)
        bundle = make_bundle(count=5)
"""

from .common import (
    SAMPLE_HEADERS,
    CLEAN_HEADERS,
    SAMPLE_FILE_HASH,
    make_row,
    make_rows,
    make_clean_rows,
    write_csv,
    write_sample_csv,
    make_leaves,
    make_bundle,
    make_anchor_record,
)

__all__ = [
    "SAMPLE_HEADERS",
    "CLEAN_HEADERS",
    "SAMPLE_FILE_HASH",
    "make_row",
    "make_rows",
    "make_clean_rows",
    "write_csv",
    "write_sample_csv",
    "make_leaves",
    "make_bundle",
    "make_anchor_record",
]
