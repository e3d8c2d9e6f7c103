"""Guarded Transition — retry loop behaviour independent of any engine.

Tests cover:
    - success on first attempt commits once
    - a lost write reloads and re-validates
    - StoreBusyError after max_attempts lost writes (retryable, retry hint set)
    - a row vanishing between attempts surfaces the not-found error
    - refusals are logged at WARNING with the error code
"""

import logging

import pytest

from bountyboard.core.errors import (
    ResourceNotFoundError, StoreBusyError, BountyNotOpenError,
)
from bountyboard.services.guarded_transition import (
    run_guarded_transition, RETRY_AFTER_MS,
)


class _Script:
    """Scripted load/commit results, consumed one per call."""

    def __init__(self, loads, commits):
        self.loads = list(loads)
        self.commits = list(commits)
        self.validated = []

    async def load(self):
        return self.loads.pop(0)

    async def commit(self, current):
        return self.commits.pop(0)

    def validate(self, current):
        self.validated.append(current)
        return None


def _missing():
    return ResourceNotFoundError("Bounty", "b-1")


async def test_first_attempt_success():
    script = _Script(loads=["row"], commits=["written"])
    result = await run_guarded_transition(
        "op", script.load, _missing, script.validate, script.commit,
    )
    assert result == "written"
    assert script.validated == ["row"]


async def test_lost_write_reloads_and_revalidates():
    script = _Script(loads=["v1", "v2"], commits=[None, "written"])
    result = await run_guarded_transition(
        "op", script.load, _missing, script.validate, script.commit,
    )
    assert result == "written"
    assert script.validated == ["v1", "v2"]


async def test_busy_after_max_attempts():
    script = _Script(loads=["row"] * 2, commits=[None, None])
    with pytest.raises(StoreBusyError) as exc:
        await run_guarded_transition(
            "op", script.load, _missing, script.validate, script.commit, max_attempts=2,
        )
    assert exc.value.retryable
    assert exc.value.context.retry_after_ms == RETRY_AFTER_MS
    assert exc.value.context.debug_info == {"attempts": 2}


async def test_row_vanishes_between_attempts():
    script = _Script(loads=["row", None], commits=[None])
    with pytest.raises(ResourceNotFoundError):
        await run_guarded_transition(
            "op", script.load, _missing, script.validate, script.commit,
        )


async def test_validation_error_raised_without_commit():
    script = _Script(loads=["row"], commits=[])
    with pytest.raises(BountyNotOpenError):
        await run_guarded_transition(
            "op", script.load, _missing,
            lambda current: BountyNotOpenError("settled"),
            script.commit,
        )


async def test_refusal_logged_with_error_code(caplog):
    script = _Script(loads=["row"], commits=[])
    with caplog.at_level(logging.WARNING, logger="bountyboard.services.guarded_transition"):
        with pytest.raises(BountyNotOpenError):
            await run_guarded_transition(
                "approve_application", script.load, _missing,
                lambda current: BountyNotOpenError("in_progress"),
                script.commit, log_extra={"bounty_id": "b-1"},
            )
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.error_code == "BOUNTY_NOT_OPEN"
    assert record.bounty_id == "b-1"
    assert "approve_application refused" in record.getMessage()
