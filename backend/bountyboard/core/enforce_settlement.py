"""Settlement Enforcement — two-step handshake rules for finalizing a bounty.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - State is checked BEFORE the actor: a repeated request reports the state error
    - request: in_progress -> pending_settlement, receiver only
    - confirm: pending_settlement -> settled, poster only; settled is terminal

Design Decisions:
    - SETTLEMENT_STEPS table drives both operations so the state machine lives in one place
"""

from bountyboard.core.domain_types import UserId, BountyStatus
from bountyboard.core.errors import (
    ErrorContext, BountyBoardError,
    BountyNotInSettlingError, BountyNotInPendingError,
    NotBountyReceiverError, NotBountyOwnerError,
)
from bountyboard.core.records import BountyRecord

# (from_status, to_status) per settlement step
SETTLEMENT_STEPS: dict[str, tuple[BountyStatus, BountyStatus]] = {
    "request": (BountyStatus.IN_PROGRESS, BountyStatus.PENDING_SETTLEMENT),
    "confirm": (BountyStatus.PENDING_SETTLEMENT, BountyStatus.SETTLED),
}


def _context(bounty: BountyRecord, actor_id: UserId) -> ErrorContext:
    return ErrorContext(bounty_id=str(bounty.id), actor_id=str(actor_id))


def check_in_progress(
    bounty: BountyRecord, actor_id: UserId,
) -> BountyNotInSettlingError | None:
    if bounty.status != SETTLEMENT_STEPS["request"][0]:
        return BountyNotInSettlingError(
            bounty.status.value, _context(bounty, actor_id),
        )
    return None


def check_receiver(
    bounty: BountyRecord, receiver_id: UserId,
) -> NotBountyReceiverError | None:
    if bounty.receiver_id != receiver_id:
        return NotBountyReceiverError(_context(bounty, receiver_id))
    return None


def check_pending_settlement(
    bounty: BountyRecord, actor_id: UserId,
) -> BountyNotInPendingError | None:
    if bounty.status != SETTLEMENT_STEPS["confirm"][0]:
        return BountyNotInPendingError(
            bounty.status.value, _context(bounty, actor_id),
        )
    return None


def check_poster(
    bounty: BountyRecord, owner_id: UserId,
) -> NotBountyOwnerError | None:
    if bounty.poster_id != owner_id:
        return NotBountyOwnerError(_context(bounty, owner_id))
    return None


def validate_settlement_request(
    bounty: BountyRecord, receiver_id: UserId,
) -> BountyBoardError | None:
    """Receiver asks the poster to release the reward."""
    return (
        check_in_progress(bounty, receiver_id)
        or check_receiver(bounty, receiver_id)
    )


def validate_settlement_confirmation(
    bounty: BountyRecord, owner_id: UserId,
) -> BountyBoardError | None:
    """Poster confirms the deliverable and finalizes the bounty."""
    return (
        check_pending_settlement(bounty, owner_id)
        or check_poster(bounty, owner_id)
    )
