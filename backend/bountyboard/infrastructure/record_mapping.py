"""Record Mapping — ORM rows to core records.

Invariants:
    - Every datetime leaving this module is timezone-aware UTC (SQLite hands back
      naive values for DateTime(timezone=True))
    - Status strings are parsed into their enums; an unknown value raises ValueError
"""

from datetime import datetime, timezone

from bountyboard.core.domain_types import (
    BountyId, ApplicationId, InvitationId, UserId, TeamId,
    BountyStatus, ApplicationStatus, InvitationStatus,
)
from bountyboard.core.records import BountyRecord, ApplicationRecord, InvitationRecord
from bountyboard.models.bounty import Bounty
from bountyboard.models.application import Application
from bountyboard.models.invitation import Invitation


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def bounty_record(row: Bounty) -> BountyRecord:
    return BountyRecord(
        id=BountyId(row.id),
        poster_id=UserId(row.poster_id),
        receiver_id=UserId(row.receiver_id) if row.receiver_id else None,
        title=row.title,
        description=row.description,
        reward=row.reward,
        currency=row.currency,
        status=BountyStatus(row.status),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def application_record(row: Application) -> ApplicationRecord:
    return ApplicationRecord(
        id=ApplicationId(row.id),
        bounty_id=BountyId(row.bounty_id),
        user_id=UserId(row.user_id),
        proposal=row.proposal,
        status=ApplicationStatus(row.status),
        reason=row.reason,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def invitation_record(row: Invitation) -> InvitationRecord:
    return InvitationRecord(
        id=InvitationId(row.id),
        inviter_id=UserId(row.inviter_id),
        invitee_id=UserId(row.invitee_id),
        team_id=TeamId(row.team_id),
        status=InvitationStatus(row.status),
        message=row.message,
        response_message=row.response_message,
        expires_at=as_utc(row.expires_at),
        responded_at=as_utc(row.responded_at),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )
