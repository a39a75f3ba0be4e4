"""
Dataset handling: sanitizing, row canonicalization and batch partitioning.
"""
from .canonical_row import (
    CANONICAL_DELIMITER,
    WHITESPACE_CHARS,
    canonical_row_bytes,
    canonicalize_row,
    normalize_value,
)
from .partition import (
    BatchRange,
    find_batch,
    iter_batches,
    partition_rows,
)
from .sanitize import (
    DEFAULT_DROP_COLUMNS,
    SanitizeResult,
    file_sha256_hex,
    filter_headers,
    load_clean_csv,
    sanitize_csv,
)

__all__ = [
    "CANONICAL_DELIMITER",
    "WHITESPACE_CHARS",
    "canonical_row_bytes",
    "canonicalize_row",
    "normalize_value",
    "BatchRange",
    "find_batch",
    "iter_batches",
    "partition_rows",
    "DEFAULT_DROP_COLUMNS",
    "SanitizeResult",
    "file_sha256_hex",
    "filter_headers",
    "load_clean_csv",
    "sanitize_csv",
]
