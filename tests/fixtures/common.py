"""
Common test fixtures shared by all modules.

Provides factory functions for the core rowproof data structures:
- Sample CSV headers / rows and CSV files on disk
- Leaf digests
- ProofBundle (via the real build path)
- AnchorRecord
"""

import csv
from pathlib import Path
from typing import Any, Optional, Sequence

from core.crypto.hashing import sha256
from core.dataset.partition import BatchRange
from core.schemas.bundle import AnchorRecord, ProofBundle
from orchestrator.pipeline import build_batch


# =============================================================================
# Rows & CSV
# =============================================================================

SAMPLE_HEADERS = [
    "Order ID",
    "Customer Name",
    "Customer Email",
    "Customer Password",
    "Customer Street",
    "Product",
    "Amount",
]

CLEAN_HEADERS = ["Order ID", "Customer Name", "Product", "Amount"]

SAMPLE_FILE_HASH = "0x" + "ab" * 32


def make_row(i: int) -> dict[str, str]:
    """One raw row, including the sensitive columns."""
    return {
        "Order ID": str(1000 + i),
        "Customer Name": f"Customer {i}",
        "Customer Email": f"customer{i}@example.com",
        "Customer Password": f"secret-{i}",
        "Customer Street": f"{i} Main  Street",
        "Product": f"Widget {i % 3}",
        "Amount": f"{i * 10}.00",
    }


def make_rows(count: int) -> list[dict[str, str]]:
    return [make_row(i) for i in range(count)]


def make_clean_rows(count: int) -> list[dict[str, str]]:
    """Rows as they look after sanitizing (only CLEAN_HEADERS)."""
    return [{h: row[h] for h in CLEAN_HEADERS} for row in make_rows(count)]


def write_csv(
    path: Path,
    rows: Sequence[dict[str, Any]],
    headers: Optional[Sequence[str]] = None,
) -> Path:
    """Write rows to a CSV file with a header line."""
    headers = list(headers or SAMPLE_HEADERS)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()
        writer.writerows(rows)
    return path


def write_sample_csv(path: Path, count: int = 7) -> Path:
    return write_csv(path, make_rows(count))


# =============================================================================
# Leaves
# =============================================================================

def make_leaves(count: int) -> list[bytes]:
    """Leaves sha256("0"), sha256("1"), ..."""
    return [sha256(str(i).encode("utf-8")) for i in range(count)]


# =============================================================================
# Bundles & Anchors
# =============================================================================

def make_bundle(
    count: int = 5,
    batch_id: int = 0,
    start_row: int = 0,
    file_hash: str = SAMPLE_FILE_HASH,
) -> ProofBundle:
    """Build a real proof bundle over `count` clean rows."""
    rows = make_clean_rows(start_row + count)[start_row:]
    batch = BatchRange(batch_id=batch_id, start_row=start_row, end_row=start_row + count)
    return build_batch(batch, rows, CLEAN_HEADERS, file_hash)


def make_anchor_record(
    bundle: ProofBundle,
    merkle_root: Optional[str] = None,
    anchored_at: int = 1_700_000_000,
) -> AnchorRecord:
    """Anchor record for a bundle, optionally with a different root."""
    return AnchorRecord(
        batch_id=bundle.batch.batch_id,
        file_hash=bundle.file_hash,
        start_row=bundle.batch.start_row,
        end_row=bundle.batch.end_row,
        merkle_root=merkle_root or bundle.batch.root,
        anchored_at=anchored_at,
    )
