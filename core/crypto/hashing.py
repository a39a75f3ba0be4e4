"""
Hashing Utilities
Basic hashing and row hashing utilities for Merkle commitments.

This module provides:
- SHA-256 hashing for raw bytes
- Row hashing (leaf digests) over canonical records
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Digests cross boundaries as lowercase, 0x-prefixed, 64 hex chars
- All operations are deterministic
"""
from __future__ import annotations

import hashlib

from core.schemas.errors import ErrorCodes, ValidationException


# Every digest in the system is a SHA-256 output
DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    """SHA-256 of raw bytes as a 0x-prefixed hex string."""
    return to_hex(sha256(data))


def hash_row(canonical: str | bytes) -> bytes:
    """
    Hash a canonical record into a 32-byte leaf digest.

    Rule: leaf = sha256(canonical.encode("utf-8"))

    Args:
        canonical: Canonical record string (or its UTF-8 bytes)

    Returns:
        32-byte SHA-256 digest
    """
    if isinstance(canonical, str):
        canonical = canonical.encode("utf-8")
    return sha256(canonical)


def hash_row_hex(canonical: str | bytes) -> str:
    """hash_row() encoded as a 0x-prefixed hex string."""
    return to_hex(hash_row(canonical))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Upper- and lower-case hex digits are both accepted.

    Raises:
        ValidationException: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not isinstance(hex_string, str) or not hex_string.startswith("0x"):
        raise ValidationException(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}...",
            code=ErrorCodes.INVALID_DIGEST,
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValidationException(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}",
            code=ErrorCodes.INVALID_DIGEST,
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValidationException(
            f"Invalid hex characters in string: {e}",
            code=ErrorCodes.INVALID_DIGEST,
        ) from e


def digest_from_hex(hex_string: str) -> bytes:
    """
    Decode a 0x-prefixed digest and check it is exactly 32 bytes.

    Raises:
        ValidationException: If the string is not a well-formed 32-byte digest
    """
    data = from_hex(hex_string)
    if len(data) != DIGEST_SIZE:
        raise ValidationException(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(data)}",
            code=ErrorCodes.INVALID_DIGEST,
            details={"value": hex_string},
        )
    return data


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences.

    This is used for computing Merkle parent hashes:
    parent = sha256(left + right), no separator.
    """
    return sha256(left + right)


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
