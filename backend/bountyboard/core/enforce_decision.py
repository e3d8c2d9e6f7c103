"""Application Decision Enforcement — validates approve/reject before anything is written.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return the error instance on violation, None on success
    - validate_* chains all checks — first error wins
    - Check order: ownership, then application state, then bounty state

Design Decisions:
    - Return errors (not raise): the engine re-runs the same validation after a lost
      compare-and-swap, so the checks must be callable repeatedly without control flow
      tricks; the engine is the single place that raises
"""

from bountyboard.core.domain_types import UserId, ApplicationStatus, BountyStatus
from bountyboard.core.errors import (
    ErrorContext, BountyBoardError,
    NotBountyOwnerError, ApplicationAlreadyDecidedError, BountyNotOpenError,
)
from bountyboard.core.records import ApplicationRecord, BountyRecord


def _context(
    application: ApplicationRecord, bounty: BountyRecord, actor_id: UserId,
) -> ErrorContext:
    return ErrorContext(
        application_id=str(application.id),
        bounty_id=str(bounty.id),
        actor_id=str(actor_id),
    )


def check_bounty_owner(
    application: ApplicationRecord, bounty: BountyRecord, owner_id: UserId,
) -> NotBountyOwnerError | None:
    """Only the bounty's poster may decide its applications."""
    if bounty.poster_id != owner_id:
        return NotBountyOwnerError(_context(application, bounty, owner_id))
    return None


def check_application_pending(
    application: ApplicationRecord, bounty: BountyRecord, owner_id: UserId,
) -> ApplicationAlreadyDecidedError | None:
    """An application is decided exactly once."""
    if application.status != ApplicationStatus.PENDING:
        return ApplicationAlreadyDecidedError(
            application.status.value, _context(application, bounty, owner_id),
        )
    return None


def check_bounty_open(
    application: ApplicationRecord, bounty: BountyRecord, owner_id: UserId,
) -> BountyNotOpenError | None:
    """Acceptance is only possible while the bounty is still `created`."""
    if bounty.status != BountyStatus.CREATED:
        return BountyNotOpenError(
            bounty.status.value, _context(application, bounty, owner_id),
        )
    return None


def validate_approval(
    application: ApplicationRecord, bounty: BountyRecord, owner_id: UserId,
) -> BountyBoardError | None:
    """Chain all approval checks. Returns first error or None."""
    return (
        check_bounty_owner(application, bounty, owner_id)
        or check_application_pending(application, bounty, owner_id)
        or check_bounty_open(application, bounty, owner_id)
    )


def validate_rejection(
    application: ApplicationRecord, bounty: BountyRecord, owner_id: UserId,
) -> BountyBoardError | None:
    """Chain all rejection checks. The bounty's own status is irrelevant here."""
    return (
        check_bounty_owner(application, bounty, owner_id)
        or check_application_pending(application, bounty, owner_id)
    )
