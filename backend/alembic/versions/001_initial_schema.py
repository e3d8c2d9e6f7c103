"""Initial schema — bounties, applications, invitations.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "bounties",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("poster_id", UUID(as_uuid=True), nullable=False),
        sa.Column("receiver_id", UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("reward", sa.Numeric(18, 2), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False, server_default="USD"),
        sa.Column("status", sa.String(20), nullable=False, server_default="created"),
        *_timestamps(),
        sa.CheckConstraint(
            "(receiver_id IS NULL) = "
            "(status NOT IN ('in_progress', 'pending_settlement', 'settled'))",
            name="ck_bounties_receiver_matches_status",
        ),
    )
    op.create_index("ix_bounties_poster_id", "bounties", ["poster_id"])
    op.create_index("ix_bounties_receiver_id", "bounties", ["receiver_id"])
    op.create_index("ix_bounties_status", "bounties", ["status"])
    op.create_index("ix_bounties_deleted_at", "bounties", ["deleted_at"])

    op.create_table(
        "applications",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "bounty_id", UUID(as_uuid=True),
            sa.ForeignKey("bounties.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("proposal", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("reason", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_applications_bounty_id", "applications", ["bounty_id"])
    op.create_index("ix_applications_user_id", "applications", ["user_id"])
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_deleted_at", "applications", ["deleted_at"])

    op.create_table(
        "invitations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("inviter_id", UUID(as_uuid=True), nullable=False),
        sa.Column("invitee_id", UUID(as_uuid=True), nullable=False),
        sa.Column("team_id", UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("message", sa.Text, nullable=False, server_default=""),
        sa.Column("response_message", sa.Text, nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "(responded_at IS NULL) = (status = 'pending')",
            name="ck_invitations_responded_matches_status",
        ),
    )
    op.create_index("ix_invitations_inviter_id", "invitations", ["inviter_id"])
    op.create_index("ix_invitations_invitee_id", "invitations", ["invitee_id"])
    op.create_index("ix_invitations_team_id", "invitations", ["team_id"])
    op.create_index("ix_invitations_status", "invitations", ["status"])
    op.create_index("ix_invitations_responded_at", "invitations", ["responded_at"])
    op.create_index("ix_invitations_expires_at", "invitations", ["expires_at"])
    op.create_index("ix_invitations_deleted_at", "invitations", ["deleted_at"])


def downgrade() -> None:
    op.drop_table("invitations")
    op.drop_table("applications")
    op.drop_table("bounties")
