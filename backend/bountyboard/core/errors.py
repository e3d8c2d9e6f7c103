"""Error Hierarchy — typed, categorized exceptions for every lifecycle failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are deterministic and caller-correctable: retryable is False
    - StoreBusyError is the only retryable error; it carries retry_after_ms
    - to_response() produces the REST envelope used by whatever boundary embeds the core
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BountyBoardError base: one handler can map all failures
    - Intermediate classes per taxonomy entry (Forbidden, InvalidState, Expired) so callers
      can catch a whole family while tests assert the concrete code
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    FORBIDDEN = "forbidden"
    INVALID_STATE = "invalid_state"
    EXPIRED = "expired"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFLICT = "conflict"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    bounty_id: str | None = None
    application_id: str | None = None
    invitation_id: str | None = None
    actor_id: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class BountyBoardError(Exception):
    """Base exception for all bounty board errors."""

    retryable = False

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
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "bounty_id": self.context.bounty_id,
                    "application_id": self.context.application_id,
                    "invitation_id": self.context.invitation_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InputValidationError(BountyBoardError):
    """Operation input failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidResponseStatusError(InputValidationError):
    """Invitation response asked for a status other than accepted/rejected."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invitation can only be answered with 'accepted' or 'rejected', got '{status}'",
            "status", context,
        )
        self.code = "INVALID_RESPONSE_STATUS"


class ResourceNotFoundError(BountyBoardError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ─── Authorization (403) ────────────────────────────────────────

class ForbiddenError(BountyBoardError):
    """Actor lacks the relationship to the entity that the operation requires."""
    def __init__(self, message: str, code: str, context: ErrorContext | None = None):
        super().__init__(
            message, code, ErrorCategory.FORBIDDEN,
            ErrorSeverity.ERROR, context, 403,
        )


class NotBountyOwnerError(ForbiddenError):
    """Caller is not the bounty's poster."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the bounty owner can perform this action.",
            "NOT_BOUNTY_OWNER", context,
        )


class NotBountyReceiverError(ForbiddenError):
    """Caller is not the bounty's assigned receiver."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the bounty receiver can request settlement.",
            "NOT_BOUNTY_RECEIVER", context,
        )


class NotInviteeError(ForbiddenError):
    """Caller is not the invited user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the invited user can respond to this invitation.",
            "NOT_INVITEE", context,
        )


class NotInviterError(ForbiddenError):
    """Caller did not send the invitation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Only the inviter can cancel this invitation.",
            "NOT_INVITER", context,
        )


# ─── State Preconditions (400) ──────────────────────────────────

class InvalidStateError(BountyBoardError):
    """Entity is not in the status the requested transition needs."""
    def __init__(
        self, message: str, code: str, current_status: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.INVALID_STATE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.current_status = current_status


class BountyNotOpenError(InvalidStateError):
    """Approve attempted on a bounty that already left `created`."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Bounty is no longer accepting applications (status: {current_status}).",
            "BOUNTY_NOT_OPEN", current_status, context,
        )


class ApplicationAlreadyDecidedError(InvalidStateError):
    """Approve/reject attempted on an application that is not pending."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Application has already been decided (status: {current_status}).",
            "APPLICATION_ALREADY_DECIDED", current_status, context,
        )


class BountyNotInSettlingError(InvalidStateError):
    """Settlement requested on a bounty that is not in progress."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Bounty is not in progress (status: {current_status}).",
            "BOUNTY_NOT_IN_SETTLING", current_status, context,
        )


class BountyNotInPendingError(InvalidStateError):
    """Settlement confirmed on a bounty that is not pending settlement."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Bounty is not pending settlement (status: {current_status}).",
            "BOUNTY_NOT_IN_PENDING", current_status, context,
        )


class CannotRespondToInvitationError(InvalidStateError):
    """Invitation was already answered or cancelled."""
    def __init__(self, current_status: str, context: ErrorContext | None = None):
        super().__init__(
            "Cannot respond to this invitation.",
            "CANNOT_RESPOND_TO_INVITATION", current_status, context,
        )


class InvitationExpiredError(BountyBoardError):
    """Invitation is pending but past its deadline."""
    def __init__(self, expires_at: datetime, context: ErrorContext | None = None):
        super().__init__(
            f"Invitation expired at {expires_at.isoformat()}.",
            "INVITATION_EXPIRED", ErrorCategory.EXPIRED,
            ErrorSeverity.ERROR, context, 400,
        )
        self.expires_at = expires_at


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(BountyBoardError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StoreBusyError(BountyBoardError):
    """Guarded write could not complete in time: lock timeout or repeated lost races."""

    retryable = True

    def __init__(
        self, message: str, retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            message, "STORE_BUSY", ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, ctx, 503,
        )
