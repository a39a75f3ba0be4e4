"""
Schemas & Errors
File: errors.py

Purpose: Standard error taxonomy across the rowproof pipeline.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

A negative verification result is NOT an error: verify functions return
False (or a failed CheckResult) for a well-formed proof that does not match.
Exceptions mean verification could not be attempted at all.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the pipeline."""

    # Validation Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_LEAF_SIZE = "INVALID_LEAF_SIZE"
    INVALID_BATCH_SIZE = "INVALID_BATCH_SIZE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    INVALID_DIGEST = "INVALID_DIGEST"
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"

    # Input Errors
    PROOF_ENTRY_NOT_FOUND = "PROOF_ENTRY_NOT_FOUND"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"
    BATCH_NOT_ANCHORED = "BATCH_NOT_ANCHORED"
    DATASET_EMPTY = "DATASET_EMPTY"

    # Integrity (reported through results, never raised)
    ROOT_MISMATCH = "ROOT_MISMATCH"
    LEAF_HASH_MISMATCH = "LEAF_HASH_MISMATCH"
    LEAF_COUNT_MISMATCH = "LEAF_COUNT_MISMATCH"

    # Pipeline & Execution Errors
    PIPELINE_CANCELLED = "PIPELINE_CANCELLED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class RowproofError(BaseModel):
    """
    Base error model for structured error communication.

    Used when errors cross a serialization boundary (API responses,
    verification reports) instead of being raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_DIGEST],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class RowproofException(Exception):
    """
    Base exception for all rowproof errors.

    Carries structured error information and can be converted to a
    RowproofError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "ROWPROOF_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> RowproofError:
        """Convert this exception to a RowproofError model."""
        return RowproofError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationException(RowproofException):
    """Malformed input to a core operation: empty leaves, bad sizes, bad indices."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.SCHEMA_VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class InputException(RowproofException):
    """A referenced artifact, proof entry or anchor could not be found."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.ARTIFACT_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, details=details)


class PipelineCancelled(RowproofException):
    """Raised at a batch boundary when a build run is cancelled."""

    def __init__(
        self,
        message: str = "Build cancelled",
        batch_id: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if batch_id is not None:
            details["batch_id"] = batch_id
        super().__init__(
            message=message,
            code=ErrorCodes.PIPELINE_CANCELLED,
            details=details,
        )
