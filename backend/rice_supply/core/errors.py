"""Error Hierarchy — typed, categorized exceptions for every API failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are user-fixable; internal errors (500-level) are not
    - The caller only ever sees `message`; debug detail stays server-side

Design Decisions:
    - Single hierarchy with RiceSupplyError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for server-side logging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    record_id: str | None = None
    debug_info: dict[str, Any] | None = None


class RiceSupplyError(Exception):
    """Base exception for all rice supply API errors."""

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

    def log_extra(self) -> dict:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_code": self.code,
            "entity": self.context.entity,
            "record_id": self.context.record_id,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(RiceSupplyError):
    """Request payload or path parameter failed a field rule."""
    def __init__(
        self, message: str, fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.fields = fields or []


class NotFoundError(RiceSupplyError):
    """Requested record does not exist."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class ConflictError(RiceSupplyError):
    """Record would duplicate an existing id or alternate key."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Internal Errors (500-level) ────────────────────────────────

class InternalError(RiceSupplyError):
    """Catch-all for failures the caller cannot fix."""
    def __init__(
        self, message: str = "Internal server error",
        context: ErrorContext | None = None,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        code: str = "INTERNAL_ERROR",
    ):
        super().__init__(
            message, code, category, ErrorSeverity.CRITICAL, context, 500,
        )


class ChainInteractionError(InternalError):
    """Blockchain RPC call failed. Only raised inside the outbox worker."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Blockchain {operation} failed: {message}", context,
            ErrorCategory.EXTERNAL_API, "CHAIN_INTERACTION_ERROR",
        )
        self.operation = operation
