"""Bounty Lifecycle — end-to-end engagement through the facade.

Invariants:
    - Inputs that fail schema validation raise InputValidationError before any write
    - Every returned view reflects the post-transition record
    - receiver_id is set iff the bounty is in_progress / pending_settlement / settled

Tests cover:
    - Poster P posts a bounty; users A and B apply; P approves A; approving B fails;
      A requests settlement; A cannot confirm; P confirms; settled is terminal
    - Invitation accepted once, second answer refused, expiry enforced
    - Validation errors for seed and decision inputs
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from bountyboard.core.domain_types import BountyStatus, ApplicationStatus, InvitationStatus
from bountyboard.core.errors import (
    BountyNotOpenError, BountyNotInPendingError, BountyNotInSettlingError,
    CannotRespondToInvitationError, InputValidationError, InvalidResponseStatusError,
    InvitationExpiredError, NotBountyOwnerError, ResourceNotFoundError,
)
from bountyboard.schemas.lifecycle import ApplicationView, BountyView, InvitationView


async def test_full_engagement(lifecycle, fake_db):
    poster, user_a, user_b = uuid4(), uuid4(), uuid4()

    bounty = await lifecycle.post_bounty(poster, "  Build a CLI  ", Decimal("250.00"))
    assert isinstance(bounty, BountyView)
    assert bounty.title == "Build a CLI"
    assert bounty.status == BountyStatus.CREATED

    app_a = await lifecycle.submit_application(bounty.id, user_a, "I have done this before")
    app_b = await lifecycle.submit_application(bounty.id, user_b)

    approved = await lifecycle.approve_application(app_a.id, poster, "Best fit")
    assert isinstance(approved, ApplicationView)
    assert approved.status == ApplicationStatus.ACCEPTED
    stored = fake_db.bounties[bounty.id]
    assert stored.status == BountyStatus.IN_PROGRESS
    assert stored.receiver_id == user_a

    with pytest.raises(BountyNotOpenError):
        await lifecycle.approve_application(app_b.id, poster, "Also good")
    assert fake_db.applications[app_b.id].status == ApplicationStatus.PENDING

    requested = await lifecycle.request_settlement(bounty.id, user_a)
    assert requested.status == BountyStatus.PENDING_SETTLEMENT

    with pytest.raises(NotBountyOwnerError):
        await lifecycle.confirm_settlement(bounty.id, user_a)

    settled = await lifecycle.confirm_settlement(bounty.id, poster)
    assert settled.status == BountyStatus.SETTLED
    assert settled.receiver_id == user_a
    assert settled.reward == Decimal("250.00")

    with pytest.raises(BountyNotInPendingError):
        await lifecycle.confirm_settlement(bounty.id, poster)
    with pytest.raises(BountyNotInSettlingError):
        await lifecycle.request_settlement(bounty.id, user_a)


async def test_receiver_invariant_holds_at_every_step(lifecycle, fake_db):
    poster, worker = uuid4(), uuid4()
    bounty = await lifecycle.post_bounty(poster, "Translate docs", Decimal("80"))
    application = await lifecycle.submit_application(bounty.id, worker)

    steps = [
        lambda: lifecycle.approve_application(application.id, poster, "ok"),
        lambda: lifecycle.request_settlement(bounty.id, worker),
        lambda: lifecycle.confirm_settlement(bounty.id, poster),
    ]
    assert fake_db.bounties[bounty.id].receiver_is_consistent
    for step in steps:
        await step()
        assert fake_db.bounties[bounty.id].receiver_is_consistent


async def test_reject_application_through_facade(lifecycle):
    poster = uuid4()
    bounty = await lifecycle.post_bounty(poster, "Review PR", Decimal("10"))
    application = await lifecycle.submit_application(bounty.id, uuid4())

    rejected = await lifecycle.reject_application(application.id, poster, "  too late ")
    assert rejected.status == ApplicationStatus.REJECTED
    assert rejected.reason == "too late"


async def test_invitation_answered_once(lifecycle, clock):
    inviter, invitee = uuid4(), uuid4()
    invitation = await lifecycle.send_invitation(
        inviter, invitee, uuid4(), "Join the team", clock.now + timedelta(days=1),
    )
    assert isinstance(invitation, InvitationView)
    assert invitation.status == InvitationStatus.PENDING

    accepted = await lifecycle.respond_to_invitation(invitation.id, "accepted", " Sure ")
    assert accepted.status == InvitationStatus.ACCEPTED
    assert accepted.response_message == "Sure"
    assert accepted.responded_at == clock.now

    with pytest.raises(CannotRespondToInvitationError):
        await lifecycle.respond_to_invitation(invitation.id, "rejected")


async def test_invitation_expiry_through_facade(lifecycle, clock):
    invitation = await lifecycle.send_invitation(
        uuid4(), uuid4(), uuid4(), expires_at=clock.now + timedelta(hours=1),
    )
    clock.advance(hours=2)
    with pytest.raises(InvitationExpiredError):
        await lifecycle.respond_to_invitation(invitation.id, "accepted")


async def test_cancel_invitation_through_facade(lifecycle, fake_db):
    inviter = uuid4()
    invitation = await lifecycle.send_invitation(inviter, uuid4(), uuid4())

    assert await lifecycle.cancel_invitation(invitation.id, inviter) is None
    assert fake_db.invitations[invitation.id].status == InvitationStatus.REJECTED


# ─── Validation ─────────────────────────────────────────────────

@pytest.mark.parametrize("title, reward, currency, field", [
    ("   ", Decimal("10"), "USD", "title"),
    ("Fine", Decimal("0"), "USD", "reward"),
    ("Fine", Decimal("-5"), "USD", "reward"),
    ("Fine", Decimal("1.005"), "USD", "reward"),
    ("Fine", Decimal("10"), "usd", "currency"),
])
async def test_post_bounty_rejects_bad_input(lifecycle, fake_db, title, reward, currency, field):
    with pytest.raises(InputValidationError) as exc:
        await lifecycle.post_bounty(uuid4(), title, reward, currency)
    assert exc.value.field == field
    assert exc.value.code == "VALIDATION_ERROR"
    assert fake_db.bounties == {}


async def test_submit_application_to_unknown_bounty(lifecycle):
    with pytest.raises(ResourceNotFoundError):
        await lifecycle.submit_application(uuid4(), uuid4())


async def test_decision_reason_too_long(lifecycle):
    with pytest.raises(InputValidationError) as exc:
        await lifecycle.approve_application(uuid4(), uuid4(), "x" * 2001)
    assert exc.value.field == "reason"


async def test_respond_with_pending_is_invalid(lifecycle):
    invitation = await lifecycle.send_invitation(uuid4(), uuid4(), uuid4())
    with pytest.raises(InvalidResponseStatusError):
        await lifecycle.respond_to_invitation(invitation.id, "pending")


async def test_naive_expiry_taken_as_utc(lifecycle, clock):
    naive = (clock.now + timedelta(days=1)).replace(tzinfo=None)
    invitation = await lifecycle.send_invitation(uuid4(), uuid4(), uuid4(), expires_at=naive)
    assert invitation.expires_at == clock.now + timedelta(days=1)


async def test_string_ids_accepted_by_every_operation(lifecycle, fake_db):
    poster, worker, inviter = uuid4(), uuid4(), uuid4()
    bounty = await lifecycle.post_bounty(str(poster), "Tidy logs", Decimal("15"))
    application = await lifecycle.submit_application(str(bounty.id), str(worker))

    await lifecycle.approve_application(str(application.id), str(poster), "ok")
    requested = await lifecycle.request_settlement(str(bounty.id), str(worker))
    assert requested.status == BountyStatus.PENDING_SETTLEMENT
    settled = await lifecycle.confirm_settlement(str(bounty.id), str(poster))
    assert settled.status == BountyStatus.SETTLED

    invitation = await lifecycle.send_invitation(str(inviter), str(uuid4()), str(uuid4()))
    await lifecycle.cancel_invitation(str(invitation.id), str(inviter))
    assert fake_db.invitations[invitation.id].status == InvitationStatus.REJECTED


@pytest.mark.parametrize("call, field", [
    (lambda lc: lc.request_settlement("not-a-uuid", uuid4()), "bounty_id"),
    (lambda lc: lc.confirm_settlement(uuid4(), "not-a-uuid"), "actor_id"),
    (lambda lc: lc.cancel_invitation("not-a-uuid"), "invitation_id"),
    (lambda lc: lc.cancel_invitation(uuid4(), "not-a-uuid"), "inviter_id"),
])
async def test_malformed_ids_rejected_before_any_read(lifecycle, call, field):
    with pytest.raises(InputValidationError) as exc:
        await call(lifecycle)
    assert exc.value.field == field
    assert exc.value.http_status == 400
