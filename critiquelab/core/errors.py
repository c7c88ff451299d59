"""
Custom exception hierarchy for CritiqueLab.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class CritiqueLabException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def headers(self) -> dict[str, str] | None:
        return None


class RateLimitedError(CritiqueLabException):
    """The caller exceeded the per-IP request window of this service."""
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"

    def __init__(self, retry_after: int, limit: int):
        self.retry_after = retry_after
        self.limit = limit
        super().__init__(
            message=(
                "Too many requests. Please slow down and try again. "
                f"You can make up to {limit} requests per window."
            ),
            details={"retry_after": retry_after, "limit": limit},
        )

    def headers(self) -> dict[str, str]:
        return {
            "Retry-After": str(self.retry_after),
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
        }


class ServiceNotConfiguredError(CritiqueLabException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "SERVICE_UNAVAILABLE"

    def __init__(self):
        super().__init__(message="Service temporarily unavailable.")


class OracleRateLimitedError(CritiqueLabException):
    """The upstream AI gateway answered 429."""
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "ORACLE_RATE_LIMITED"

    def __init__(self):
        super().__init__(message="AI service rate limit exceeded. Please try again later.")


class OracleQuotaExhaustedError(CritiqueLabException):
    """The upstream AI gateway answered 402."""
    http_status = status.HTTP_402_PAYMENT_REQUIRED
    code = "ORACLE_QUOTA_EXHAUSTED"

    def __init__(self):
        super().__init__(message="AI credits exhausted. Please contact support.")


class OracleUnavailableError(CritiqueLabException):
    """Any other non-2xx answer or a transport failure talking to the gateway."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "ORACLE_UNAVAILABLE"

    def __init__(self, upstream_status: int | None = None):
        super().__init__(
            message="Failed to process your request. Please try again.",
            details={"upstream_status": upstream_status} if upstream_status else {},
        )


class InvalidOracleResponse(CritiqueLabException):
    """The gateway answered 2xx but the payload does not match the expected schema."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "INVALID_ORACLE_RESPONSE"

    def __init__(self, reason: str):
        super().__init__(
            message="Received an unexpected response from the AI service.",
            details={"reason": reason},
        )


class CritiqueNotFoundError(CritiqueLabException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "CRITIQUE_NOT_FOUND"

    def __init__(self, critique_id: str):
        super().__init__(
            message=f"Saved critique {critique_id} was not found.",
            details={"id": critique_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def critiquelab_exception_handler(
    request: Request, exc: CritiqueLabException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=exc.headers(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
