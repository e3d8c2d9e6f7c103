"""Bounty Lifecycle — the in-process interface the outer layers call.

Invariants:
    - Inputs are validated by pydantic schemas before any engine runs; a schema
      failure surfaces as InputValidationError (never pydantic's own exception)
    - Engines return records; this module returns *View models
    - Actor ids come from the caller's identity resolver and are not verified here
    - create_lifecycle() sets up logging and the database before yielding and disposes
      the engine on exit

Design Decisions:
    - One facade over three engines: callers see the six lifecycle operations plus the
      three create paths, not the store plumbing
    - Lifespan-style async context manager for startup/shutdown
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import AsyncGenerator, Callable, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from bountyboard.config import Settings, get_settings
from bountyboard.core.domain_types import (
    BountyId, ApplicationId, InvitationId, UserId, TeamId, InvitationStatus,
)
from bountyboard.core.enforce_invitation import parse_response_status
from bountyboard.core.errors import InputValidationError, ResourceNotFoundError, ErrorContext
from bountyboard.core.repository_protocols import (
    BountyStore, ApplicationStore, InvitationStore,
)
from bountyboard.infrastructure.application_store import SqlApplicationStore
from bountyboard.infrastructure.bounty_store import SqlBountyStore
from bountyboard.infrastructure.database import init_db
from bountyboard.infrastructure.invitation_store import SqlInvitationStore
from bountyboard.infrastructure.observability import setup_logging
from bountyboard.schemas.lifecycle import (
    BountyCreate, ApplicationSubmit, InvitationSend,
    ApplicationDecision, SettlementStep, InvitationReply, InvitationCancel,
    BountyView, ApplicationView, InvitationView,
)
from bountyboard.services.application_decision import ApplicationDecisionEngine
from bountyboard.services.guarded_transition import DEFAULT_MAX_ATTEMPTS
from bountyboard.services.invitation_response import InvitationResponseEngine, utc_now
from bountyboard.services.settlement import SettlementEngine

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _validated(schema: type[SchemaT], **fields) -> SchemaT:
    """Build a schema or raise InputValidationError naming the first bad field."""
    try:
        return schema(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"])
        raise InputValidationError(f"{field}: {first['msg']}", field) from None


class BountyLifecycle:
    """Engagement lifecycle operations over injected stores."""

    def __init__(
        self,
        bounties: BountyStore,
        applications: ApplicationStore,
        invitations: InvitationStore,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._bounties = bounties
        self._applications = applications
        self._invitations = invitations
        self.decisions = ApplicationDecisionEngine(applications, max_attempts)
        self.settlement = SettlementEngine(bounties, max_attempts)
        self.invitation_responses = InvitationResponseEngine(
            invitations, clock, max_attempts,
        )

    # ─── Create paths ───────────────────────────────────────────

    async def post_bounty(
        self, poster_id: UUID, title: str, reward: Decimal,
        currency: str = "USD", description: str = "",
    ) -> BountyView:
        body = _validated(
            BountyCreate, poster_id=poster_id, title=title, reward=reward,
            currency=currency, description=description,
        )
        record = await self._bounties.create(
            UserId(body.poster_id), body.title, body.reward,
            body.currency, body.description,
        )
        return BountyView.model_validate(record)

    async def submit_application(
        self, bounty_id: UUID, user_id: UUID, proposal: str = "",
    ) -> ApplicationView:
        body = _validated(
            ApplicationSubmit, bounty_id=bounty_id, user_id=user_id, proposal=proposal,
        )
        if await self._bounties.get(BountyId(body.bounty_id)) is None:
            raise ResourceNotFoundError(
                "Bounty", str(body.bounty_id),
                ErrorContext(bounty_id=str(body.bounty_id), actor_id=str(body.user_id)),
            )
        record = await self._applications.submit(
            BountyId(body.bounty_id), UserId(body.user_id), body.proposal,
        )
        return ApplicationView.model_validate(record)

    async def send_invitation(
        self, inviter_id: UUID, invitee_id: UUID, team_id: UUID,
        message: str = "", expires_at: datetime | None = None,
    ) -> InvitationView:
        body = _validated(
            InvitationSend, inviter_id=inviter_id, invitee_id=invitee_id,
            team_id=team_id, message=message, expires_at=expires_at,
        )
        record = await self._invitations.send(
            UserId(body.inviter_id), UserId(body.invitee_id), TeamId(body.team_id),
            body.message, body.expires_at,
        )
        return InvitationView.model_validate(record)

    # ─── Application decisions ──────────────────────────────────

    async def approve_application(
        self, application_id: UUID, owner_id: UUID, reason: str,
    ) -> ApplicationView:
        body = _validated(
            ApplicationDecision,
            application_id=application_id, owner_id=owner_id, reason=reason,
        )
        record = await self.decisions.approve(
            ApplicationId(body.application_id), UserId(body.owner_id), body.reason,
        )
        return ApplicationView.model_validate(record)

    async def reject_application(
        self, application_id: UUID, owner_id: UUID, reason: str,
    ) -> ApplicationView:
        body = _validated(
            ApplicationDecision,
            application_id=application_id, owner_id=owner_id, reason=reason,
        )
        record = await self.decisions.reject(
            ApplicationId(body.application_id), UserId(body.owner_id), body.reason,
        )
        return ApplicationView.model_validate(record)

    # ─── Settlement ─────────────────────────────────────────────

    async def request_settlement(self, bounty_id: UUID, receiver_id: UUID) -> BountyView:
        body = _validated(SettlementStep, bounty_id=bounty_id, actor_id=receiver_id)
        record = await self.settlement.request_settlement(
            BountyId(body.bounty_id), UserId(body.actor_id),
        )
        return BountyView.model_validate(record)

    async def confirm_settlement(self, bounty_id: UUID, owner_id: UUID) -> BountyView:
        body = _validated(SettlementStep, bounty_id=bounty_id, actor_id=owner_id)
        record = await self.settlement.confirm_settlement(
            BountyId(body.bounty_id), UserId(body.actor_id),
        )
        return BountyView.model_validate(record)

    # ─── Invitations ────────────────────────────────────────────

    async def respond_to_invitation(
        self, invitation_id: UUID, status: str | InvitationStatus,
        response_message: str | None = None, invitee_id: UUID | None = None,
    ) -> InvitationView:
        body = _validated(
            InvitationReply,
            invitation_id=invitation_id,
            status=parse_response_status(status),
            response_message=response_message,
            invitee_id=invitee_id,
        )
        record = await self.invitation_responses.respond(
            InvitationId(body.invitation_id), body.status, body.response_message,
            UserId(body.invitee_id) if body.invitee_id else None,
        )
        return InvitationView.model_validate(record)

    async def cancel_invitation(
        self, invitation_id: UUID, inviter_id: UUID | None = None,
    ) -> None:
        body = _validated(
            InvitationCancel, invitation_id=invitation_id, inviter_id=inviter_id,
        )
        await self.invitation_responses.cancel(
            InvitationId(body.invitation_id),
            UserId(body.inviter_id) if body.inviter_id else None,
        )


@asynccontextmanager
async def create_lifecycle(
    settings: Settings | None = None,
) -> AsyncGenerator[BountyLifecycle, None]:
    """Startup/shutdown: logging, database pool, SQL stores, engines."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        lock_timeout_ms=settings.database_lock_timeout_ms,
    )
    logger.info("Bounty lifecycle started")
    try:
        yield BountyLifecycle(
            SqlBountyStore(db),
            SqlApplicationStore(db),
            SqlInvitationStore(db),
            max_attempts=settings.transition_max_attempts,
        )
    finally:
        await db.dispose()
        logger.info("Bounty lifecycle shut down")
