"""Domain Types — rich types that replace bare primitives across the lifecycle engine.

Invariants:
    - BountyId, ApplicationId, InvitationId, UserId, TeamId wrap UUIDs — never use
      bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - RECEIVER_STATUSES is the exact set of bounty states that carry a receiver

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: values are stored verbatim in the DB `status` columns
    - Like targets are a closed enum + id pair instead of a free "type" string. They
      serve the code that lives next to the lifecycle (likes, feeds); no lifecycle
      engine reads them
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

BountyId = NewType("BountyId", UUID)
ApplicationId = NewType("ApplicationId", UUID)
InvitationId = NewType("InvitationId", UUID)
UserId = NewType("UserId", UUID)
TeamId = NewType("TeamId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class BountyStatus(str, Enum):
    """Bounty lifecycle states — maps to DB `bounties.status`."""
    CREATED = "created"
    IN_PROGRESS = "in_progress"
    PENDING_SETTLEMENT = "pending_settlement"
    SETTLED = "settled"
    CANCELLED = "cancelled"


class ApplicationStatus(str, Enum):
    """Application decision states — maps to DB `applications.status`."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class InvitationStatus(str, Enum):
    """Invitation response states — maps to DB `invitations.status`."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class LikeableType(str, Enum):
    """Entity kinds a like may point at. Used by the like feature, not the lifecycle."""
    BOUNTY = "bounty"
    COMMENT = "comment"
    USER = "user"


# Bounty states in which receiver_id must be set (and outside which it must be null)
RECEIVER_STATUSES = frozenset({
    BountyStatus.IN_PROGRESS,
    BountyStatus.PENDING_SETTLEMENT,
    BountyStatus.SETTLED,
})

# States an invitee may answer with
RESPONSE_STATUSES = frozenset({
    InvitationStatus.ACCEPTED,
    InvitationStatus.REJECTED,
})


@dataclass(frozen=True)
class LikeTarget:
    """Discriminated reference to a likeable entity."""
    target_type: LikeableType
    target_id: UUID

    @classmethod
    def parse(cls, target_type: str, target_id: UUID) -> "LikeTarget":
        """Build from the raw pair; raises ValueError for unknown types."""
        return cls(LikeableType(target_type), target_id)
