"""Bounty ORM — persists a posted task, its reward and its lifecycle status.

Invariants:
    - id is UUID primary key
    - poster_id, reward, currency never change after insert
    - status transitions: created -> in_progress -> pending_settlement -> settled
    - receiver_id is set iff status is in_progress / pending_settlement / settled
      (enforced by ck_bounties_receiver_matches_status)

Design Decisions:
    - Numeric reward: money is never a float
    - Receiver invariant duplicated as a CHECK constraint so a write that bypasses
      the engines still cannot break it
"""

import uuid
from decimal import Decimal

from sqlalchemy import String, Text, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from bountyboard.db.base import Base, TimestampMixin


class Bounty(TimestampMixin, Base):
    """Bounty entity — a paid task awaiting a worker."""
    __tablename__ = "bounties"
    __table_args__ = (
        CheckConstraint(
            "(receiver_id IS NULL) = "
            "(status NOT IN ('in_progress', 'pending_settlement', 'settled'))",
            name="ck_bounties_receiver_matches_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    poster_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    receiver_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    reward: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USD",
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="created", index=True,
    )
