"""Lifecycle Records — immutable snapshots of bounties, applications and invitations.

Invariants:
    - Records are frozen: a transition produces a new record from the store, never a
      mutated one
    - All datetimes are timezone-aware UTC
    - BountyRecord.receiver_is_consistent holds for every record a store returns

Design Decisions:
    - Dataclasses instead of ORM instances: engines and pure checks stay free of
      session state and lazy loading
    - Descriptive fields (title, proposal, message) ride along so callers can render
      the refreshed record without a second read
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from bountyboard.core.domain_types import (
    BountyId, ApplicationId, InvitationId, UserId, TeamId,
    BountyStatus, ApplicationStatus, InvitationStatus, RECEIVER_STATUSES,
)


@dataclass(frozen=True)
class BountyRecord:
    """A posted task with its reward and current lifecycle status."""
    id: BountyId
    poster_id: UserId
    title: str
    reward: Decimal
    currency: str
    status: BountyStatus
    created_at: datetime
    updated_at: datetime
    receiver_id: UserId | None = None
    description: str = ""

    @property
    def receiver_is_consistent(self) -> bool:
        """receiver_id is set exactly when the status carries a receiver."""
        return (self.receiver_id is not None) == (self.status in RECEIVER_STATUSES)


@dataclass(frozen=True)
class ApplicationRecord:
    """A user's offer to fulfill one bounty."""
    id: ApplicationId
    bounty_id: BountyId
    user_id: UserId
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime
    proposal: str = ""
    reason: str | None = None


@dataclass(frozen=True)
class InvitationRecord:
    """A proposal for a user to join a team."""
    id: InvitationId
    inviter_id: UserId
    invitee_id: UserId
    team_id: TeamId
    status: InvitationStatus
    created_at: datetime
    updated_at: datetime
    message: str = ""
    response_message: str | None = None
    expires_at: datetime | None = None
    responded_at: datetime | None = None
