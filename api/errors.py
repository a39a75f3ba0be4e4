"""
API Error Handling

Standardized error handling for the API.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorResponse, ErrorDetail
from core.schemas.errors import InputException, RowproofException, ValidationException


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )

    @classmethod
    def from_exception(cls, exc: RowproofException) -> "APIError":
        """Map a core exception onto an HTTP status."""
        if isinstance(exc, ValidationException):
            status_code = 400
        elif isinstance(exc, InputException):
            status_code = 404
        else:
            status_code = 500
        return cls(code=exc.code, message=exc.message, status_code=status_code, details=exc.details)


class NotFoundError(APIError):
    """Requested artifact or entry does not exist."""

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            code=code,
            message=message,
            status_code=404,
            details=details,
        )


class InternalError(APIError):
    """Internal server error."""

    def __init__(self, message: str = "Internal server error", details: dict[str, Any] | None = None):
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def rowproof_error_handler(request: Request, exc: RowproofException) -> JSONResponse:
    """Handle core exceptions that escape a route."""
    return await api_error_handler(request, APIError.from_exception(exc))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return await api_error_handler(
        request,
        InternalError("An unexpected error occurred", details={"type": type(exc).__name__}),
    )
