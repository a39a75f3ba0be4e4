"""
Dataset - CSV Sanitizer
File: sanitize.py

Purpose: Turn a raw CSV export into the cleaned, ordered row set that the
Merkle pipeline commits to.

Steps:
    1. Read the header row and every data row, in file order
    2. Drop denylisted columns (identifiers and free-form PII)
    3. Write the cleaned CSV (header + rows)
    4. Hash the cleaned file bytes: this is the dataset-level fileHash
    5. Write a meta JSON next to it

The denylist is always passed in by the caller; DEFAULT_DROP_COLUMNS is only
the default value callers start from.
"""
from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from core.crypto.hashing import sha256_hex
from core.schemas.errors import ErrorCodes, InputException

logger = logging.getLogger(__name__)


DEFAULT_DROP_COLUMNS: frozenset[str] = frozenset({
    "Customer Email",
    "Customer Password",
    "Customer Street",
})

CSV_ENCODING = "utf-8"

Row = dict[str, str]


@dataclass
class SanitizeResult:
    """Outcome of a sanitize run."""
    headers: list[str]
    row_count: int
    file_hash: str
    dropped_columns: list[str] = field(default_factory=list)

    def to_meta(self) -> dict:
        return {
            "headers": self.headers,
            "rowCount": self.row_count,
            "droppedColumns": self.dropped_columns,
            "fileHash": self.file_hash,
        }


def _read_rows(csv_path: Path) -> tuple[list[str], list[Row]]:
    """Read a CSV with a header row; ragged rows are padded or truncated."""
    if not csv_path.exists():
        raise InputException(
            f"CSV file not found: {csv_path}",
            code=ErrorCodes.ARTIFACT_NOT_FOUND,
            details={"path": str(csv_path)},
        )

    with open(csv_path, "r", encoding=CSV_ENCODING, newline="") as f:
        reader = csv.DictReader(f, restval="")
        fieldnames = list(reader.fieldnames or [])
        rows: list[Row] = []
        for record in reader:
            rows.append({
                name: "" if record.get(name) is None else str(record[name])
                for name in fieldnames
            })

    return fieldnames, rows


def filter_headers(headers: Iterable[str], drop_columns: Iterable[str]) -> list[str]:
    """Keep header order, removing every denylisted column."""
    dropped = set(drop_columns)
    return [h for h in headers if h not in dropped]


def write_clean_csv(out_csv_path: Path, headers: list[str], rows: list[Row]) -> None:
    out_csv_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_csv_path, "w", encoding=CSV_ENCODING, newline="") as f:
        writer = csv.DictWriter(
            f,
            fieldnames=headers,
            extrasaction="ignore",
            lineterminator="\n",
        )
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def sanitize_csv(
    csv_path: str | Path,
    out_csv_path: str | Path,
    out_meta_path: str | Path,
    *,
    drop_columns: Iterable[str] = DEFAULT_DROP_COLUMNS,
) -> SanitizeResult:
    """
    Sanitize a raw CSV into a cleaned CSV plus meta JSON.

    Args:
        csv_path: Raw input CSV (header row required)
        out_csv_path: Where to write the cleaned CSV
        out_meta_path: Where to write {headers,rowCount,droppedColumns,fileHash}
        drop_columns: Column names to remove

    Returns:
        SanitizeResult with the retained headers and the cleaned file hash

    Raises:
        InputException: If the input file does not exist
    """
    csv_path = Path(csv_path)
    out_csv_path = Path(out_csv_path)
    out_meta_path = Path(out_meta_path)
    drop = sorted(set(drop_columns))

    raw_headers, raw_rows = _read_rows(csv_path)
    headers = filter_headers(raw_headers, drop)
    rows = [{h: row.get(h, "") for h in headers} for row in raw_rows]

    removed = [h for h in raw_headers if h not in headers]
    if removed:
        logger.info(f"Dropping columns: {', '.join(removed)}")

    write_clean_csv(out_csv_path, headers, rows)

    file_hash = sha256_hex(out_csv_path.read_bytes())

    result = SanitizeResult(
        headers=headers,
        row_count=len(rows),
        file_hash=file_hash,
        dropped_columns=drop,
    )

    out_meta_path.parent.mkdir(parents=True, exist_ok=True)
    out_meta_path.write_text(json.dumps(result.to_meta(), indent=2), encoding="utf-8")

    logger.info(f"Sanitized {len(rows)} rows from {csv_path} (fileHash {file_hash})")
    return result


def load_clean_csv(clean_csv_path: str | Path) -> tuple[list[str], list[Row]]:
    """
    Load a cleaned CSV back as (headers, rows) in file order.

    Raises:
        InputException: If the file does not exist
    """
    return _read_rows(Path(clean_csv_path))


def file_sha256_hex(path: str | Path) -> str:
    """0x-prefixed SHA-256 of a file's bytes."""
    return sha256_hex(Path(path).read_bytes())
