"""Application Decision Enforcement — tests for pure approve/reject validation.

Tests cover:
    - check_bounty_owner rejects anyone but the poster
    - check_application_pending rejects decided applications
    - check_bounty_open rejects bounties that left `created`
    - validate_approval chains owner -> pending -> open (first error wins)
    - validate_rejection ignores the bounty's own status
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from bountyboard.core.domain_types import ApplicationStatus, BountyStatus
from bountyboard.core.enforce_decision import (
    check_bounty_owner,
    check_application_pending,
    check_bounty_open,
    validate_approval,
    validate_rejection,
)
from bountyboard.core.records import ApplicationRecord, BountyRecord

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
OWNER = uuid4()
APPLICANT = uuid4()


def _make_pair(
    app_status: ApplicationStatus = ApplicationStatus.PENDING,
    bounty_status: BountyStatus = BountyStatus.CREATED,
) -> tuple[ApplicationRecord, BountyRecord]:
    """Helper: application + bounty with the given statuses."""
    bounty = BountyRecord(
        id=uuid4(), poster_id=OWNER, title="Write docs", reward=Decimal("50.00"),
        currency="USD", status=bounty_status, created_at=NOW, updated_at=NOW,
        receiver_id=APPLICANT if bounty_status != BountyStatus.CREATED else None,
    )
    application = ApplicationRecord(
        id=uuid4(), bounty_id=bounty.id, user_id=APPLICANT, status=app_status,
        created_at=NOW, updated_at=NOW,
    )
    return application, bounty


# ─── check_bounty_owner ─────────────────────────────────────────

def test_owner_passes():
    app, bounty = _make_pair()
    assert check_bounty_owner(app, bounty, OWNER) is None


def test_non_owner_is_forbidden():
    app, bounty = _make_pair()
    error = check_bounty_owner(app, bounty, APPLICANT)
    assert error is not None
    assert error.code == "NOT_BOUNTY_OWNER"
    assert error.context.application_id == str(app.id)
    assert error.context.actor_id == str(APPLICANT)


# ─── check_application_pending ──────────────────────────────────

def test_pending_application_passes():
    app, bounty = _make_pair()
    assert check_application_pending(app, bounty, OWNER) is None


def test_decided_application_fails():
    app, bounty = _make_pair(app_status=ApplicationStatus.REJECTED)
    error = check_application_pending(app, bounty, OWNER)
    assert error.code == "APPLICATION_ALREADY_DECIDED"
    assert error.current_status == "rejected"


# ─── check_bounty_open ──────────────────────────────────────────

def test_created_bounty_is_open():
    app, bounty = _make_pair()
    assert check_bounty_open(app, bounty, OWNER) is None


def test_in_progress_bounty_is_not_open():
    app, bounty = _make_pair(bounty_status=BountyStatus.IN_PROGRESS)
    error = check_bounty_open(app, bounty, OWNER)
    assert error.code == "BOUNTY_NOT_OPEN"
    assert error.current_status == "in_progress"


# ─── validate_approval ──────────────────────────────────────────

def test_validate_approval_passes_when_all_satisfied():
    app, bounty = _make_pair()
    assert validate_approval(app, bounty, OWNER) is None


def test_validate_approval_owner_checked_first():
    app, bounty = _make_pair(
        app_status=ApplicationStatus.ACCEPTED, bounty_status=BountyStatus.SETTLED,
    )
    assert validate_approval(app, bounty, uuid4()).code == "NOT_BOUNTY_OWNER"


def test_validate_approval_pending_checked_before_open():
    app, bounty = _make_pair(
        app_status=ApplicationStatus.ACCEPTED, bounty_status=BountyStatus.IN_PROGRESS,
    )
    assert validate_approval(app, bounty, OWNER).code == "APPLICATION_ALREADY_DECIDED"


def test_validate_approval_second_application_on_taken_bounty():
    app, bounty = _make_pair(bounty_status=BountyStatus.IN_PROGRESS)
    assert validate_approval(app, bounty, OWNER).code == "BOUNTY_NOT_OPEN"


# ─── validate_rejection ─────────────────────────────────────────

def test_validate_rejection_allowed_on_taken_bounty():
    app, bounty = _make_pair(bounty_status=BountyStatus.IN_PROGRESS)
    assert validate_rejection(app, bounty, OWNER) is None


def test_validate_rejection_requires_owner():
    app, bounty = _make_pair()
    assert validate_rejection(app, bounty, APPLICANT).code == "NOT_BOUNTY_OWNER"


def test_validate_rejection_requires_pending():
    app, bounty = _make_pair(app_status=ApplicationStatus.REJECTED)
    assert validate_rejection(app, bounty, OWNER).code == "APPLICATION_ALREADY_DECIDED"
