"""Application ORM — persists a user's offer to fulfill a bounty.

Invariants:
    - Always belongs to a Bounty (bounty_id FK) and an applicant (user_id)
    - status transitions: pending -> accepted | rejected, exactly once
    - reason is written only together with the decision

Design Decisions:
    - bounty relationship eager-joined: the decision engine always needs the poster
      and bounty status next to the application
"""

import uuid

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from bountyboard.db.base import Base, TimestampMixin


class Application(TimestampMixin, Base):
    """Application entity — one applicant's proposal for one bounty."""
    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    bounty_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("bounties.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    proposal: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    bounty: Mapped["Bounty"] = relationship("Bounty", lazy="joined")
