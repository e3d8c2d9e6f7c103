"""Lifecycle Schemas — pydantic models with field-level validation for the core's boundary.

Invariants:
    - Free text is stripped and length-bounded before it reaches a store
    - reward is a positive Decimal; currency is an upper-case code
    - expires_at is normalised to UTC (naive input is taken as UTC)
    - *View models are built from core records (from_attributes) and are what the
      lifecycle facade returns

Design Decisions:
    - Views mirror the records field-for-field: the boundary can serialise them with
      model_dump(mode="json") and no custom encoders
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bountyboard.core.domain_types import (
    BountyStatus, ApplicationStatus, InvitationStatus,
)


# --- Inputs -------------------------------------------------------------------

class BountyCreate(BaseModel):
    """New bounty — poster, title and reward are required."""
    poster_id: UUID
    title: str = Field(min_length=1, max_length=255)
    reward: Decimal = Field(gt=0, max_digits=18, decimal_places=2)
    currency: str = Field("USD", pattern=r"^[A-Z]{3,10}$")
    description: str = Field("", max_length=10_000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class ApplicationSubmit(BaseModel):
    """New application from an applicant to a bounty."""
    bounty_id: UUID
    user_id: UUID
    proposal: str = Field("", max_length=10_000)

    @field_validator("proposal")
    @classmethod
    def strip_proposal(cls, v: str) -> str:
        return v.strip()


class InvitationSend(BaseModel):
    """New team invitation, optionally expiring."""
    inviter_id: UUID
    invitee_id: UUID
    team_id: UUID
    message: str = Field("", max_length=2000)
    expires_at: datetime | None = None

    @field_validator("expires_at")
    @classmethod
    def to_utc(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ApplicationDecision(BaseModel):
    """Owner's decision on an application — the reason is kept with the record."""
    application_id: UUID
    owner_id: UUID
    reason: str = Field("", max_length=2000)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        return v.strip()


class SettlementStep(BaseModel):
    """One settlement step: the receiver requests, the poster confirms."""
    bounty_id: UUID
    actor_id: UUID


class InvitationReply(BaseModel):
    """Invitee's answer. Status is pre-checked to be accepted or rejected."""
    invitation_id: UUID
    status: InvitationStatus
    response_message: str | None = Field(None, max_length=2000)
    invitee_id: UUID | None = None

    @field_validator("response_message")
    @classmethod
    def strip_message(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v


class InvitationCancel(BaseModel):
    """Inviter retracts a pending invitation."""
    invitation_id: UUID
    inviter_id: UUID | None = None


# --- Outputs ------------------------------------------------------------------

class BountyView(BaseModel):
    """Public-facing bounty data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    poster_id: UUID
    receiver_id: UUID | None
    title: str
    description: str
    reward: Decimal
    currency: str
    status: BountyStatus
    created_at: datetime
    updated_at: datetime


class ApplicationView(BaseModel):
    """Public-facing application data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    bounty_id: UUID
    user_id: UUID
    proposal: str
    status: ApplicationStatus
    reason: str | None
    created_at: datetime
    updated_at: datetime


class InvitationView(BaseModel):
    """Public-facing invitation data."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    inviter_id: UUID
    invitee_id: UUID
    team_id: UUID
    status: InvitationStatus
    message: str
    response_message: str | None
    expires_at: datetime | None
    responded_at: datetime | None
    created_at: datetime
    updated_at: datetime
