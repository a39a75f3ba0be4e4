"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module: error taxonomy,
persisted artifact models and verification results.
"""

# Error models and exceptions
from .errors import (
    ErrorCodes,
    InputException,
    PipelineCancelled,
    RowproofError,
    RowproofException,
    ValidationException,
)

# Persisted artifacts
from .bundle import (
    HEX_HASH_PATTERN,
    AnchorRecord,
    BatchMeta,
    BatchSummary,
    DatasetIndex,
    ProofBundle,
    ProofEntry,
    ProofStepModel,
    validate_hex_hash,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    "ErrorCodes",
    "InputException",
    "PipelineCancelled",
    "RowproofError",
    "RowproofException",
    "ValidationException",
    "HEX_HASH_PATTERN",
    "AnchorRecord",
    "BatchMeta",
    "BatchSummary",
    "DatasetIndex",
    "ProofBundle",
    "ProofEntry",
    "ProofStepModel",
    "validate_hex_hash",
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
