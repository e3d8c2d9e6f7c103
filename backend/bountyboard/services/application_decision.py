"""Application Decision Engine — owner approves or rejects an application.

Invariants:
    - Only the bounty poster decides; an application is decided exactly once
    - Approve moves application -> accepted AND bounty -> in_progress (receiver set)
      in one atomic store call; a failed guard on either row writes neither
    - Approve on a bounty that already left `created` fails BOUNTY_NOT_OPEN, so at most
      one application per bounty is ever accepted
    - Reject touches the application only
    - Sibling pending applications are left as they are after an approval

Design Decisions:
    - The store is injected: SQL store in production, in-memory store in tests
"""

import logging

from bountyboard.core.domain_types import ApplicationId, UserId
from bountyboard.core.enforce_decision import validate_approval, validate_rejection
from bountyboard.core.errors import BountyBoardError, ResourceNotFoundError, ErrorContext
from bountyboard.core.records import ApplicationRecord, BountyRecord
from bountyboard.core.repository_protocols import ApplicationStore
from bountyboard.services.guarded_transition import (
    run_guarded_transition, DEFAULT_MAX_ATTEMPTS,
)

logger = logging.getLogger(__name__)

Loaded = tuple[ApplicationRecord, BountyRecord | None]


class ApplicationDecisionEngine:
    """Approve/reject transitions for applications."""

    def __init__(self, store: ApplicationStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._store = store
        self._max_attempts = max_attempts

    async def approve(
        self, application_id: ApplicationId, owner_id: UserId, reason: str,
    ) -> ApplicationRecord:
        """Accept the application and hand its bounty to the applicant."""

        def validate(loaded: Loaded) -> BountyBoardError | None:
            application, bounty = loaded
            if bounty is None:
                return _bounty_missing(application)
            return validate_approval(application, bounty, owner_id)

        async def commit(loaded: Loaded) -> ApplicationRecord | None:
            application, _ = loaded
            return await self._store.accept(
                application.id, application.bounty_id, application.user_id, reason,
            )

        accepted = await run_guarded_transition(
            "approve_application",
            load=lambda: self._store.get_with_bounty(application_id),
            on_missing=lambda: _application_missing(application_id),
            validate=validate,
            commit=commit,
            max_attempts=self._max_attempts,
            log_extra=_log_extra(application_id, owner_id),
        )
        logger.info(
            "Application accepted, bounty in progress",
            extra={
                **_log_extra(application_id, owner_id),
                "bounty_id": str(accepted.bounty_id),
                "to_status": accepted.status.value,
            },
        )
        return accepted

    async def reject(
        self, application_id: ApplicationId, owner_id: UserId, reason: str,
    ) -> ApplicationRecord:
        """Reject the application; the bounty is untouched."""

        def validate(loaded: Loaded) -> BountyBoardError | None:
            application, bounty = loaded
            if bounty is None:
                return _bounty_missing(application)
            return validate_rejection(application, bounty, owner_id)

        async def commit(loaded: Loaded) -> ApplicationRecord | None:
            application, _ = loaded
            return await self._store.reject(application.id, reason)

        rejected = await run_guarded_transition(
            "reject_application",
            load=lambda: self._store.get_with_bounty(application_id),
            on_missing=lambda: _application_missing(application_id),
            validate=validate,
            commit=commit,
            max_attempts=self._max_attempts,
            log_extra=_log_extra(application_id, owner_id),
        )
        logger.info(
            "Application rejected",
            extra={**_log_extra(application_id, owner_id), "to_status": rejected.status.value},
        )
        return rejected


def _log_extra(application_id: ApplicationId, owner_id: UserId) -> dict:
    return {"application_id": str(application_id), "actor_id": str(owner_id)}


def _application_missing(application_id: ApplicationId) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Application", str(application_id),
        ErrorContext(application_id=str(application_id)),
    )


def _bounty_missing(application: ApplicationRecord) -> ResourceNotFoundError:
    return ResourceNotFoundError(
        "Bounty", str(application.bounty_id),
        ErrorContext(
            application_id=str(application.id), bounty_id=str(application.bounty_id),
        ),
    )
