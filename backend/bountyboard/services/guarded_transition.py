"""Guarded Transition — load, validate, compare-and-swap, reload on a lost race.

Invariants:
    - A refused transition is logged at WARNING and raised, never swallowed
    - A lost compare-and-swap writes nothing; the loop reloads and re-validates, so a
      competing transition surfaces as the deterministic state error it caused
    - A row that disappears between load and write surfaces as the not-found error
    - After max_attempts lost races the retryable StoreBusyError is raised

Design Decisions:
    - Optimistic concurrency over row locks: the validation step never holds a lock,
      and a second writer can only lose, never overwrite
    - One loop shared by all three engines so retry and logging behave identically
"""

import logging
from typing import Awaitable, Callable, TypeVar

from bountyboard.core.errors import BountyBoardError, ErrorContext, StoreBusyError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
RETRY_AFTER_MS = 100

Loaded = TypeVar("Loaded")
Written = TypeVar("Written")


def _refuse(
    operation: str, error: BountyBoardError, log_extra: dict,
) -> BountyBoardError:
    logger.warning(
        f"{operation} refused: {error.message}",
        extra={**log_extra, "error_code": error.code},
    )
    return error


async def run_guarded_transition(
    operation: str,
    load: Callable[[], Awaitable[Loaded | None]],
    on_missing: Callable[[], BountyBoardError],
    validate: Callable[[Loaded], BountyBoardError | None],
    commit: Callable[[Loaded], Awaitable[Written | None]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    log_extra: dict | None = None,
) -> Written:
    """Run one lifecycle transition under optimistic concurrency control."""
    extra = log_extra or {}
    for attempt in range(1, max_attempts + 1):
        current = await load()
        if current is None:
            raise _refuse(operation, on_missing(), extra)
        error = validate(current)
        if error is not None:
            raise _refuse(operation, error, extra)
        written = await commit(current)
        if written is not None:
            return written
        logger.warning(
            f"{operation}: guarded write lost a race, reloading",
            extra={**extra, "attempt": attempt},
        )
    raise _refuse(
        operation,
        StoreBusyError(
            f"{operation} could not complete after {max_attempts} attempts",
            retry_after_ms=RETRY_AFTER_MS,
            context=ErrorContext(debug_info={"attempts": max_attempts}),
        ),
        extra,
    )
