"""Invitation Enforcement — decide-once and expiry rules for team invitations.

Invariants:
    - All functions are PURE: `now` is always passed in, never read from the clock
    - Pending is checked BEFORE expiry: an answered-and-expired invitation reports
      CANNOT_RESPOND_TO_INVITATION, not INVITATION_EXPIRED
    - An invitation expires strictly after expires_at (now == expires_at still answers)
    - Actor checks (invitee/inviter) are skipped when the actor is None

Design Decisions:
    - Cancellation has no expiry check: an inviter may retract a stale invitation
    - Cancelling an already-decided invitation is not an error (see is_cancellable)
"""

from datetime import datetime

from bountyboard.core.domain_types import UserId, InvitationStatus, RESPONSE_STATUSES
from bountyboard.core.errors import (
    ErrorContext, BountyBoardError,
    InvalidResponseStatusError, CannotRespondToInvitationError,
    InvitationExpiredError, NotInviteeError, NotInviterError,
)
from bountyboard.core.records import InvitationRecord


def _context(invitation: InvitationRecord, actor_id: UserId | None) -> ErrorContext:
    return ErrorContext(
        invitation_id=str(invitation.id),
        actor_id=str(actor_id) if actor_id else None,
    )


def parse_response_status(status: str | InvitationStatus) -> InvitationStatus:
    """Coerce a requested response to accepted/rejected or raise INVALID_RESPONSE_STATUS."""
    raw = status.value if isinstance(status, InvitationStatus) else str(status)
    try:
        parsed = InvitationStatus(raw)
    except ValueError:
        raise InvalidResponseStatusError(raw) from None
    if parsed not in RESPONSE_STATUSES:
        raise InvalidResponseStatusError(raw)
    return parsed


def is_expired(invitation: InvitationRecord, now: datetime) -> bool:
    return invitation.expires_at is not None and now > invitation.expires_at


def check_invitee(
    invitation: InvitationRecord, invitee_id: UserId | None,
) -> NotInviteeError | None:
    if invitee_id is not None and invitation.invitee_id != invitee_id:
        return NotInviteeError(_context(invitation, invitee_id))
    return None


def check_inviter(
    invitation: InvitationRecord, inviter_id: UserId | None,
) -> NotInviterError | None:
    if inviter_id is not None and invitation.inviter_id != inviter_id:
        return NotInviterError(_context(invitation, inviter_id))
    return None


def check_pending(
    invitation: InvitationRecord, actor_id: UserId | None,
) -> CannotRespondToInvitationError | None:
    if invitation.status != InvitationStatus.PENDING:
        return CannotRespondToInvitationError(
            invitation.status.value, _context(invitation, actor_id),
        )
    return None


def check_not_expired(
    invitation: InvitationRecord, now: datetime, actor_id: UserId | None,
) -> InvitationExpiredError | None:
    if is_expired(invitation, now):
        return InvitationExpiredError(
            invitation.expires_at, _context(invitation, actor_id),
        )
    return None


def validate_response(
    invitation: InvitationRecord, now: datetime, invitee_id: UserId | None = None,
) -> BountyBoardError | None:
    """Chain all response checks. Returns first error or None."""
    return (
        check_invitee(invitation, invitee_id)
        or check_pending(invitation, invitee_id)
        or check_not_expired(invitation, now, invitee_id)
    )


def validate_cancellation(
    invitation: InvitationRecord, inviter_id: UserId | None = None,
) -> BountyBoardError | None:
    return check_inviter(invitation, inviter_id)


def is_cancellable(invitation: InvitationRecord) -> bool:
    """Only a pending invitation is moved; anything else is already final."""
    return invitation.status == InvitationStatus.PENDING
