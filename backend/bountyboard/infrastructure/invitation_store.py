"""SQL Invitation Store — invitation persistence with a pending-guarded close.

Invariants:
    - close() writes status, response_message and responded_at together, and only
      while the row is still pending; otherwise nothing is written and None returned
    - New invitations always start pending with responded_at NULL
"""

import logging
from datetime import datetime

from sqlalchemy import select, update

from bountyboard.core.domain_types import InvitationId, UserId, TeamId, InvitationStatus
from bountyboard.core.records import InvitationRecord
from bountyboard.infrastructure.database import DatabaseSessionManager
from bountyboard.infrastructure.record_mapping import invitation_record
from bountyboard.models.invitation import Invitation

logger = logging.getLogger(__name__)


class SqlInvitationStore:
    """InvitationStore backed by the `invitations` table."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def send(
        self, inviter_id: UserId, invitee_id: UserId, team_id: TeamId,
        message: str = "", expires_at: datetime | None = None,
    ) -> InvitationRecord:
        async with self._db.session() as session:
            invitation = Invitation(
                inviter_id=inviter_id, invitee_id=invitee_id, team_id=team_id,
                message=message, expires_at=expires_at,
                status=InvitationStatus.PENDING.value,
            )
            session.add(invitation)
            await session.commit()
            await session.refresh(invitation)
            logger.info(
                "Invitation sent",
                extra={"invitation_id": str(invitation.id), "actor_id": str(inviter_id)},
            )
            return invitation_record(invitation)

    async def get(self, invitation_id: InvitationId) -> InvitationRecord | None:
        async with self._db.session() as session:
            result = await session.execute(
                select(Invitation)
                .where(Invitation.id == invitation_id)
                .where(Invitation.deleted_at.is_(None)),
            )
            invitation = result.scalar_one_or_none()
            return invitation_record(invitation) if invitation else None

    async def close(
        self, invitation_id: InvitationId, status: InvitationStatus,
        response_message: str | None, responded_at: datetime,
    ) -> InvitationRecord | None:
        async with self._db.session() as session:
            result = await session.execute(
                update(Invitation)
                .where(Invitation.id == invitation_id)
                .where(Invitation.status == InvitationStatus.PENDING.value)
                .where(Invitation.deleted_at.is_(None))
                .values(
                    status=status.value,
                    response_message=response_message,
                    responded_at=responded_at,
                )
                .execution_options(synchronize_session=False),
            )
            if result.rowcount != 1:
                await session.rollback()
                return None
            await session.commit()
            invitation = await session.get(
                Invitation, invitation_id, populate_existing=True,
            )
            return invitation_record(invitation)
