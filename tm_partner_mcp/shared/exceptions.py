from __future__ import annotations

from datetime import datetime
from typing import Optional

from mcp.types import ErrorData, INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Optional[str] = None
    timestamp: datetime


class PartnerError(Exception):
    """Base class for errors surfaced to the caller of a tool."""

    error_code: str = "PARTNER_ERROR"
    mcp_code: int = INTERNAL_ERROR
    http_status: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_error_data(self) -> ErrorData:
        return ErrorData(code=self.mcp_code, message=self.message, data=self.details)


class InvalidArgumentError(PartnerError):
    error_code = "INVALID_ARGUMENT"
    mcp_code = INVALID_PARAMS
    http_status = 400


class UpstreamRejectedError(PartnerError):
    """The Partner API answered with a non-2xx status."""

    error_code = "UPSTREAM_REJECTED"
    http_status = 502

    def __init__(self, status_code: int, reason: str, details: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(
            f"Ticketmaster Partner API error: {status_code} - {reason}", details
        )


class UpstreamUnreachableError(PartnerError):
    """The request was sent but no response came back."""

    error_code = "UPSTREAM_UNREACHABLE"
    http_status = 504

    def __init__(self, details: Optional[str] = None):
        super().__init__("No response from Ticketmaster Partner API", details)


class UnknownFailureError(PartnerError):
    error_code = "UNKNOWN_FAILURE"
    http_status = 500


class MethodNotFoundError(PartnerError):
    error_code = "METHOD_NOT_FOUND"
    mcp_code = METHOD_NOT_FOUND
    http_status = 404


__all__ = [
    "ErrorResponse",
    "PartnerError",
    "InvalidArgumentError",
    "UpstreamRejectedError",
    "UpstreamUnreachableError",
    "UnknownFailureError",
    "MethodNotFoundError",
]
