"""Boundary Protocols — contracts between the lifecycle engines and persistence.

Invariants:
    - Core NEVER imports from the shell — dependency arrows point inward only
    - Every status write is guarded on the status the engine validated: a guarded
      method returns the updated record, or None when the guard no longer matches
      (row gone or status moved on) and nothing was written
    - ApplicationStore.accept writes both rows in one atomic unit or neither

Design Decisions:
    - Protocol over ABC: structural subtyping, SQL stores and in-memory test stores
      need no shared base class
    - Async in Protocol: implementations do IO; the pure checks that decide
      transitions are never async themselves — engines orchestrate around them
    - Guarded writes instead of row locks: works identically on PostgreSQL and SQLite
      and never holds a lock across the engine's validation step
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from bountyboard.core.domain_types import (
    BountyId, ApplicationId, InvitationId, UserId, TeamId,
    BountyStatus, InvitationStatus,
)
from bountyboard.core.records import BountyRecord, ApplicationRecord, InvitationRecord


class BountyStore(Protocol):
    """Contract for bounty persistence — implemented by shell."""
    async def create(
        self, poster_id: UserId, title: str, reward: Decimal,
        currency: str = "USD", description: str = "",
    ) -> BountyRecord: ...
    async def get(self, bounty_id: BountyId) -> BountyRecord | None: ...
    async def transition(
        self, bounty_id: BountyId,
        expected: BountyStatus, new_status: BountyStatus,
    ) -> BountyRecord | None: ...


class ApplicationStore(Protocol):
    """Contract for application persistence — implemented by shell."""
    async def submit(
        self, bounty_id: BountyId, user_id: UserId, proposal: str = "",
    ) -> ApplicationRecord: ...
    async def get(self, application_id: ApplicationId) -> ApplicationRecord | None: ...
    async def get_with_bounty(
        self, application_id: ApplicationId,
    ) -> tuple[ApplicationRecord, BountyRecord | None] | None: ...
    async def accept(
        self, application_id: ApplicationId, bounty_id: BountyId,
        receiver_id: UserId, reason: str,
    ) -> ApplicationRecord | None: ...
    async def reject(
        self, application_id: ApplicationId, reason: str,
    ) -> ApplicationRecord | None: ...


class InvitationStore(Protocol):
    """Contract for invitation persistence — implemented by shell."""
    async def send(
        self, inviter_id: UserId, invitee_id: UserId, team_id: TeamId,
        message: str = "", expires_at: datetime | None = None,
    ) -> InvitationRecord: ...
    async def get(self, invitation_id: InvitationId) -> InvitationRecord | None: ...
    async def close(
        self, invitation_id: InvitationId, status: InvitationStatus,
        response_message: str | None, responded_at: datetime,
    ) -> InvitationRecord | None: ...
