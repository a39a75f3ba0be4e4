"""
Dataset - Row Canonicalization
File: canonical_row.py

Purpose: Deterministic, header-order-stable encoding of one dataset row.
The canonical record is the pre-image of the row's leaf digest.

CRITICAL: The output must be byte-for-byte identical across runs and
implementations, otherwise anchored roots can no longer be reproduced.

Rules:
    - Headers are visited in the given order; row key order is irrelevant
    - Missing or None values canonicalize to ""
    - Values are coerced with str(), runs of WHITESPACE_CHARS collapse to one
      space, then the value is trimmed of them
    - Entries are "header=value", joined by CANONICAL_DELIMITER
    - Neither the delimiter nor "=" is escaped inside values
"""

import re
from typing import Any, Mapping, Sequence

CANONICAL_DELIMITER = "|"
CANONICAL_ENCODING = "utf-8"

# ECMAScript WhiteSpace and LineTerminator code points. Unlike Python's `\s`,
# \x1c-\x1f and \x85 are excluded and \ufeff is included.
WHITESPACE_CHARS = (
    "\t\n\v\f\r \u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)

_WHITESPACE_RUN = re.compile("[" + re.escape(WHITESPACE_CHARS) + "]+")


def normalize_value(value: Any) -> str:
    """
    Normalize a single field value.

    Args:
        value: Raw field value (None is treated as missing).

    Returns:
        The value as text with whitespace collapsed and trimmed.

    Example:
        >>> normalize_value("  New \\t York  ")
        'New York'
    """
    if value is None:
        return ""
    return _WHITESPACE_RUN.sub(" ", str(value)).strip(WHITESPACE_CHARS)


def canonicalize_row(row: Mapping[str, Any], headers: Sequence[str]) -> str:
    """
    Build the canonical record for one row.

    Args:
        row: Mapping of header -> value. May omit headers or carry extra keys;
            extra keys are ignored.
        headers: Ordered header list after column filtering.

    Returns:
        "h1=v1|h2=v2|..." in header order.

    Example:
        >>> canonicalize_row({"b": " 2 ", "a": "x  y"}, ["a", "b", "c"])
        'a=x y|b=2|c='
    """
    return CANONICAL_DELIMITER.join(
        f"{header}={normalize_value(row.get(header))}" for header in headers
    )


def canonical_row_bytes(row: Mapping[str, Any], headers: Sequence[str]) -> bytes:
    """UTF-8 bytes of canonicalize_row(); this is what gets hashed."""
    return canonicalize_row(row, headers).encode(CANONICAL_ENCODING)
