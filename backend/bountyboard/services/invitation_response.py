"""Invitation Response Engine — invitee answers once; inviter may retract while pending.

Invariants:
    - respond: only accepted/rejected; pending checked before expiry; sets status,
      response_message and responded_at in one guarded write
    - cancel: pending -> rejected (responded_at set), no expiry check; an already
      decided invitation is left as it is
    - Both writes are guarded on `pending`, so a concurrent respond and cancel cannot
      both take effect
    - responded_at is set iff status != pending

Design Decisions:
    - Clock injected (defaults to UTC now) so expiry is testable without sleeping
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from bountyboard.core.domain_types import InvitationId, UserId, InvitationStatus
from bountyboard.core.enforce_invitation import (
    parse_response_status, validate_response, validate_cancellation, is_cancellable,
)
from bountyboard.core.errors import ResourceNotFoundError, ErrorContext
from bountyboard.core.records import InvitationRecord
from bountyboard.core.repository_protocols import InvitationStore
from bountyboard.services.guarded_transition import (
    run_guarded_transition, DEFAULT_MAX_ATTEMPTS,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InvitationResponseEngine:
    """Respond/cancel transitions for team invitations."""

    def __init__(
        self, store: InvitationStore,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._store = store
        self._clock = clock
        self._max_attempts = max_attempts

    async def respond(
        self, invitation_id: InvitationId, status: str | InvitationStatus,
        response_message: str | None = None, invitee_id: UserId | None = None,
    ) -> InvitationRecord:
        """Accept or reject a pending, unexpired invitation."""
        requested = parse_response_status(status)
        now = self._clock()
        log_extra = _log_extra(invitation_id, invitee_id)

        responded = await run_guarded_transition(
            "respond_to_invitation",
            load=lambda: self._store.get(invitation_id),
            on_missing=lambda: _invitation_missing(invitation_id),
            validate=lambda invitation: validate_response(invitation, now, invitee_id),
            commit=lambda invitation: self._store.close(
                invitation.id, requested, response_message, now,
            ),
            max_attempts=self._max_attempts,
            log_extra=log_extra,
        )
        logger.info(
            f"Invitation {requested.value}",
            extra={**log_extra, "to_status": requested.value},
        )
        return responded

    async def cancel(
        self, invitation_id: InvitationId, inviter_id: UserId | None = None,
    ) -> None:
        """Retract a pending invitation. Decided invitations are not touched."""
        now = self._clock()
        log_extra = _log_extra(invitation_id, inviter_id)

        async def commit(invitation: InvitationRecord) -> InvitationRecord | None:
            if not is_cancellable(invitation):
                logger.info(
                    f"Invitation already {invitation.status.value}; cancel is a no-op",
                    extra=log_extra,
                )
                return invitation
            closed = await self._store.close(
                invitation.id, InvitationStatus.REJECTED, None, now,
            )
            if closed is not None:
                logger.info(
                    "Invitation cancelled",
                    extra={**log_extra, "to_status": closed.status.value},
                )
            return closed

        await run_guarded_transition(
            "cancel_invitation",
            load=lambda: self._store.get(invitation_id),
            on_missing=lambda: _invitation_missing(invitation_id),
            validate=lambda invitation: validate_cancellation(invitation, inviter_id),
            commit=commit,
            max_attempts=self._max_attempts,
            log_extra=log_extra,
        )


def _log_extra(invitation_id: InvitationId, actor_id: UserId | None) -> dict:
    return {
        "invitation_id": str(invitation_id),
        "actor_id": str(actor_id) if actor_id else None,
    }


def _invitation_missing(invitation_id: InvitationId) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Invitation", str(invitation_id),
        ErrorContext(invitation_id=str(invitation_id)),
    )
