"""
Shared error handling for the Storefront services.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field

from opentelemetry import trace


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class StorefrontException(Exception):
    """Base exception for Storefront services."""

    status_code: int = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )

    def to_content(self) -> Dict[str, Any]:
        """JSON body sent back to the caller."""
        return self.to_response().model_dump()


class NotFoundError(StorefrontException):
    """The requested id is absent from the target store."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class OutOfStockError(StorefrontException):
    """Purchase rejected because no copies are left."""

    status_code = 400

    def __init__(self, message: str = "Book out of stock", details: Optional[Dict[str, Any]] = None):
        super().__init__("OUT_OF_STOCK", message, details)


class ValidationError(StorefrontException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ExternalServiceError(StorefrontException):
    """A downstream service was unreachable or answered unexpectedly."""

    status_code = 500

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class DownstreamResponseError(StorefrontException):
    """A downstream service answered with a structured error.

    The downstream status and body are kept so the caller can forward them
    to its own client unchanged.
    """

    def __init__(self, service: str, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        super().__init__(
            "DOWNSTREAM_ERROR",
            f"{service} responded with {status_code}",
            {"service": service, "status_code": status_code},
        )

    def to_content(self) -> Any:
        return self.payload
