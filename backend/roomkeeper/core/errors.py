"""Error Hierarchy - typed, categorized exceptions raised at the HTTP boundary.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the REST envelope, including per-field details
    - No internal details leaked in user-facing messages

Design Decisions:
    - Core and services return Failure values; only the API layer turns them
      into exceptions via from_failure()
    - ErrorContext as dataclass: observability data without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from roomkeeper.core.domain_types import FailureKind
from roomkeeper.core.result import Failure, FieldError


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
    PERMISSION = "permission"
    DATABASE = "database"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class RoomkeeperError(Exception):
    """Base exception for all Roomkeeper errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: tuple[FieldError, ...] = (),
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "details": [
                    {"field": d.field, "message": d.message}
                    for d in self.details
                ],
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(RoomkeeperError):
    """Referenced user or room member does not exist."""
    def __init__(
        self, details: tuple[FieldError, ...], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Requested resource was not found", "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR,
            context, 404, details,
        )


class ForbiddenError(RoomkeeperError):
    """Actor lacks the required admin capability."""
    def __init__(
        self, details: tuple[FieldError, ...], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Action is forbidden for this user", "FORBIDDEN",
            ErrorCategory.PERMISSION, ErrorSeverity.ERROR,
            context, 403, details,
        )


class NotAuthorizedError(RoomkeeperError):
    """Actor and target are not in a relationship that permits the action."""
    def __init__(
        self, details: tuple[FieldError, ...], context: ErrorContext | None = None,
    ):
        super().__init__(
            "User is not authorized for this action", "NOT_AUTHORIZED",
            ErrorCategory.PERMISSION, ErrorSeverity.ERROR,
            context, 401, details,
        )


class BadRequestError(RoomkeeperError):
    """Requested mutation is structurally invalid."""
    def __init__(
        self, details: tuple[FieldError, ...], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Request cannot be processed", "BAD_REQUEST",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.ERROR,
            context, 400, details,
        )


class RequestTimeoutError(RoomkeeperError):
    """Workflow did not finish within its time budget."""
    def __init__(self, timeout_seconds: float, context: ErrorContext | None = None):
        super().__init__(
            f"Request did not complete within {timeout_seconds}s",
            "TIMEOUT", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 504,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RoomkeeperError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


_ERROR_BY_KIND: dict[FailureKind, type[RoomkeeperError]] = {
    FailureKind.NOT_FOUND: NotFoundError,
    FailureKind.FORBIDDEN: ForbiddenError,
    FailureKind.NOT_AUTHORIZED: NotAuthorizedError,
    FailureKind.BAD_REQUEST: BadRequestError,
}


def from_failure(
    failure: Failure, context: ErrorContext | None = None,
) -> RoomkeeperError:
    """Map a Failure value onto its HTTP-facing exception."""
    return _ERROR_BY_KIND[failure.kind](failure.errors, context)
