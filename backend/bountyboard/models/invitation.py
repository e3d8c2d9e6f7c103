"""Invitation ORM — persists a team-join proposal with optional expiry.

Invariants:
    - status transitions: pending -> accepted | rejected, exactly once
    - responded_at is set iff status != pending
      (enforced by ck_invitations_responded_matches_status)
    - expires_at NULL means the invitation never expires

Design Decisions:
    - team_id is an opaque id: team membership lives outside the lifecycle core
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from bountyboard.db.base import Base, TimestampMixin


class Invitation(TimestampMixin, Base):
    """Invitation entity — inviter asks invitee to join a team."""
    __tablename__ = "invitations"
    __table_args__ = (
        CheckConstraint(
            "(responded_at IS NULL) = (status = 'pending')",
            name="ck_invitations_responded_matches_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    inviter_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    invitee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    response_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )
