"""Settlement Engine — receiver requests settlement, poster confirms it.

Invariants:
    - in_progress --request_settlement--> pending_settlement --confirm_settlement--> settled
    - Each step is a compare-and-swap on the bounty status: two concurrent requests on
      the same bounty cannot both succeed
    - A second request fails BOUNTY_NOT_IN_SETTLING (state check runs before the actor check)
    - settled is terminal: no further transition is defined

Design Decisions:
    - Different actors per step so neither party can finalize a reward alone
"""

import logging
from typing import Callable

from bountyboard.core.domain_types import BountyId, UserId, BountyStatus
from bountyboard.core.enforce_settlement import (
    SETTLEMENT_STEPS,
    validate_settlement_request,
    validate_settlement_confirmation,
)
from bountyboard.core.errors import BountyBoardError, ResourceNotFoundError, ErrorContext
from bountyboard.core.records import BountyRecord
from bountyboard.core.repository_protocols import BountyStore
from bountyboard.services.guarded_transition import (
    run_guarded_transition, DEFAULT_MAX_ATTEMPTS,
)

logger = logging.getLogger(__name__)


class SettlementEngine:
    """Two-step settlement handshake on a single bounty record."""

    def __init__(self, store: BountyStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self._store = store
        self._max_attempts = max_attempts

    async def request_settlement(
        self, bounty_id: BountyId, receiver_id: UserId,
    ) -> BountyRecord:
        """Receiver declares the work delivered."""
        return await self._step(
            "request", bounty_id, receiver_id,
            lambda bounty: validate_settlement_request(bounty, receiver_id),
        )

    async def confirm_settlement(
        self, bounty_id: BountyId, owner_id: UserId,
    ) -> BountyRecord:
        """Poster accepts the deliverable; the bounty becomes settled."""
        return await self._step(
            "confirm", bounty_id, owner_id,
            lambda bounty: validate_settlement_confirmation(bounty, owner_id),
        )

    async def _step(
        self, step: str, bounty_id: BountyId, actor_id: UserId,
        validate: Callable[[BountyRecord], BountyBoardError | None],
    ) -> BountyRecord:
        expected, new_status = SETTLEMENT_STEPS[step]
        log_extra = {"bounty_id": str(bounty_id), "actor_id": str(actor_id)}
        updated = await run_guarded_transition(
            f"{step}_settlement",
            load=lambda: self._store.get(bounty_id),
            on_missing=lambda: ResourceNotFoundError(
                "Bounty", str(bounty_id), ErrorContext(bounty_id=str(bounty_id)),
            ),
            validate=validate,
            commit=lambda bounty: self._store.transition(bounty.id, expected, new_status),
            max_attempts=self._max_attempts,
            log_extra=log_extra,
        )
        logger.info(
            f"Bounty moved to {new_status.value}",
            extra={
                **log_extra,
                "from_status": expected.value,
                "to_status": updated.status.value,
            },
        )
        if updated.status == BountyStatus.SETTLED:
            logger.info(
                f"Bounty settled; {updated.reward} {updated.currency} ready for payout",
                extra=log_extra,
            )
        return updated
