"""
Core cryptographic utilities.

SHA-256 row and node hashing plus 0x-hex digest encoding.
"""
from .hashing import (
    DIGEST_SIZE,
    sha256,
    sha256_hex,
    hash_row,
    hash_row_hex,
    to_hex,
    from_hex,
    digest_from_hex,
    hash_concat,
)

__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "sha256_hex",
    "hash_row",
    "hash_row_hex",
    "to_hex",
    "from_hex",
    "digest_from_hex",
    "hash_concat",
]
