"""API request and response models."""

from api.models.requests import ProofStepIn, VerifyRequest
from api.models.responses import (
    HealthResponse,
    VerifyResponse,
    ProofEntryResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "ProofStepIn",
    "VerifyRequest",
    "HealthResponse",
    "VerifyResponse",
    "ProofEntryResponse",
    "ErrorDetail",
    "ErrorResponse",
]
