"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "rowproof-api"
    version: str = "v1"


class VerifyResponse(BaseModel):
    """Response for POST /verify endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = Field(..., description="Whether the proof reproduces the root")
    computed_root: str = Field(
        ...,
        alias="computedRoot",
        description="Root implied by the leaf and proof",
    )


class ProofEntryResponse(BaseModel):
    """Response for GET /batches/{batch_id}/proofs/{row_offset}."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = Field(..., description="Whether the stored proof verifies against the trusted root")
    batch_id: int = Field(..., alias="batchId")
    row_offset: int = Field(..., alias="rowOffset")
    leaf: str = Field(..., description="Stored leaf digest")
    proof: list[dict[str, Any]] = Field(default_factory=list)
    root: str = Field(..., description="Trusted root used for verification")
    root_source: str = Field(..., alias="rootSource", description="'anchor' or 'bundle'")


class ErrorDetail(BaseModel):
    """Error detail information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = Field(default=False)
    error: ErrorDetail = Field(..., description="Error details")
