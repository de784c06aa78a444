"""Error Hierarchy — typed, categorized exceptions for all fulfillment failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; service errors (500-level) are critical
    - to_response() produces the wire envelope {"error": <message>}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with FulfillmentError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Flat {"error": message} envelope: the services' clients match on that exact string
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: int | None = None
    item_id: int | None = None
    service: str | None = None
    debug_info: dict[str, Any] | None = None


class FulfillmentError(Exception):
    """Base exception for all fulfillment errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error body."""
        return {"error": self.message}

    def log_extra(self) -> dict:
        """Structured fields for the JSON log formatter."""
        return {
            "error_code": self.code,
            "order_id": self.context.order_id,
            "item_id": self.context.item_id,
            "service": self.context.service,
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ValidationFailedError(FulfillmentError):
    """Request is missing required input or carries malformed values."""
    def __init__(self, message: str, fields: list[str] | None = None,
                 context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields or []


class ResourceNotFoundError(FulfillmentError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, resource_id: object,
                 context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InsufficientStockError(FulfillmentError):
    """Reservation asks for more units than are available."""
    def __init__(self, requested: int, available: int,
                 context: ErrorContext | None = None):
        super().__init__(
            "Insufficient inventory",
            "INSUFFICIENT_STOCK", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.requested = requested
        self.available = available


# ─── Service Errors (500-level) ─────────────────────────────────

class DownstreamUnavailableError(FulfillmentError):
    """Gateway could not obtain a successful answer from a downstream service."""
    def __init__(self, service_name: str, reason: str = "",
                 context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.service = service_name
        if reason:
            ctx.debug_info = {"reason": reason}
        super().__init__(
            f"{service_name} service unavailable",
            "DOWNSTREAM_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.service_name = service_name


class InternalFailureError(FulfillmentError):
    """Unexpected fault while creating or updating a record."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INTERNAL_FAILURE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
