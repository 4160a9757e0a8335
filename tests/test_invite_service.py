from datetime import timedelta

import pytest

from mediator_api.errors import ConflictError, InviteError, NotFoundError
from mediator_api.services.invite_service import (
    INVITE_ALPHABET,
    INVITE_CODE_LENGTH,
    InviteService,
    build_invite_url,
    generate_invite_code,
)
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.session_service import SessionService
from mediator_api.utils.clock import utc_now
from mediator_api.utils.metrics import metrics_collector


@pytest.fixture
def session(db):
    return SessionService(db).create_session(None, "alice", "Chores", display_name="Alice")


@pytest.fixture
def invites(db):
    return InviteService(db, base_url="https://mediator.example")


def expire(db, session):
    session.invite_expires_at = utc_now() - timedelta(minutes=1)
    db.add(session)
    db.commit()


def test_generated_codes_use_unambiguous_alphabet():
    for _ in range(50):
        code = generate_invite_code()
        assert len(code) == INVITE_CODE_LENGTH
        assert set(code) <= set(INVITE_ALPHABET)
        assert not set(code) & set("01OI")


def test_build_invite_url():
    assert build_invite_url("ABCD2345", "https://mediator.example/") == (
        "https://mediator.example/dashboard/sessions/join?code=ABCD2345"
    )


def test_invite_round_trip(db, session, invites):
    info = invites.generate_invite(session.id, expires_in_hours=24)

    status = invites.get_invite_status(session.id)

    assert status.has_invite is True
    assert status.is_expired is False
    assert status.code == info.code
    assert status.url == info.url
    assert status.expires_at == info.expires_at
    assert info.expires_at > utc_now() + timedelta(hours=23)
    db.refresh(session)
    assert session.session_mode == "collaborative"
    assert metrics_collector.get_metrics()["counters"]["invites_generated_total"] == 1


def test_regenerating_replaces_previous_code(session, invites):
    first = invites.generate_invite(session.id)
    second = invites.generate_invite(session.id)

    assert invites.get_invite_status(session.id).code == second.code
    if first.code != second.code:
        with pytest.raises(InviteError):
            invites.join_by_code(first.code, "bob")


def test_expired_invite_reported_as_absent(db, session, invites):
    invites.generate_invite(session.id)
    expire(db, session)

    status = invites.get_invite_status(session.id)

    assert status.has_invite is False
    assert status.is_expired is True
    assert status.code is None


def test_no_invite_status(session, invites):
    status = invites.get_invite_status(session.id)
    assert status.has_invite is False
    assert status.code is None


def test_revoke_clears_code(session, invites):
    info = invites.generate_invite(session.id)

    invites.revoke_invite(session.id)

    assert invites.get_invite_status(session.id).has_invite is False
    with pytest.raises(InviteError):
        invites.join_by_code(info.code, "bob")


def test_generate_for_unknown_session(invites):
    with pytest.raises(NotFoundError):
        invites.generate_invite("missing")


def test_generate_for_inactive_session(db, session, invites):
    SessionService(db).update_status(session.id, "paused")

    with pytest.raises(ConflictError):
        invites.generate_invite(session.id)


def test_join_registers_partner_and_consumes_code(db, session, invites):
    info = invites.generate_invite(session.id)

    result = invites.join_by_code(info.code, "bob", "Bob")

    assert result.success is True
    assert result.session_id == session.id
    assert result.already_joined is False

    participants = ParticipantService(db).get_participants(session.id)
    assert [(p.user_id, p.slot, p.role) for p in participants] == [
        ("alice", 1, "initiator"),
        ("bob", 2, "partner"),
    ]

    db.refresh(session)
    assert session.invite_code is None
    assert session.invite_expires_at is None
    assert metrics_collector.get_metrics()["counters"]["session_joins_total"] == 1


def test_join_saturation(db, session, invites):
    info = invites.generate_invite(session.id)
    invites.join_by_code(info.code, "bob")

    with pytest.raises(ConflictError):
        invites.join_by_code(info.code, "carol")

    with pytest.raises(ConflictError):
        invites.generate_invite(session.id)

    assert ParticipantService(db).count(session.id) == 2


def test_full_session_rejects_fresh_code(db, session, invites):
    info = invites.generate_invite(session.id)
    invites.join_by_code(info.code, "bob")

    # A code written directly onto a full session still cannot add a third member
    session.invite_code = "FULL2345"
    session.invite_expires_at = utc_now() + timedelta(hours=1)
    db.add(session)
    db.commit()

    with pytest.raises(InviteError):
        invites.join_by_code("FULL2345", "carol")
    assert ParticipantService(db).count(session.id) == 2


def test_initiator_cannot_join_own_session(db, session, invites):
    info = invites.generate_invite(session.id)

    with pytest.raises(InviteError):
        invites.join_by_code(info.code, "alice")

    assert ParticipantService(db).count(session.id) == 1
    assert invites.get_invite_status(session.id).code == info.code
    assert metrics_collector.get_metrics()["counters"]["session_join_rejections_total"] == 1


def test_registered_partner_rejoining_is_idempotent(db, session, invites):
    ParticipantService(db).add_partner(session.id, "bob", "Bob")
    db.commit()
    session.invite_code = "AGAIN234"
    db.add(session)
    db.commit()

    result = invites.join_by_code("AGAIN234", "bob")

    assert result.already_joined is True
    assert ParticipantService(db).count(session.id) == 2


def test_join_with_unknown_code(invites):
    with pytest.raises(InviteError):
        invites.join_by_code("NOPE2345", "bob")


def test_join_with_expired_code(db, session, invites):
    info = invites.generate_invite(session.id)
    expire(db, session)

    with pytest.raises(InviteError):
        invites.join_by_code(info.code, "bob")
    assert ParticipantService(db).count(session.id) == 1


def test_join_inactive_session(db, session, invites):
    info = invites.generate_invite(session.id)
    SessionService(db).update_status(session.id, "abandoned")

    with pytest.raises(InviteError):
        invites.join_by_code(info.code, "bob")


def test_lost_join_race_reported_as_invite_error(db, session, invites, monkeypatch):
    info = invites.generate_invite(session.id)
    # Another request took slot 2 after this one counted participants
    ParticipantService(db).add_partner(session.id, "carol")
    db.commit()
    monkeypatch.setattr(invites.participants, "count", lambda session_id: 1)

    with pytest.raises(InviteError):
        invites.join_by_code(info.code, "bob")

    assert not ParticipantService(db).is_participant(session.id, "bob")
    db.refresh(session)
    assert session.invite_code == info.code


def test_preview_by_code(db, session, invites):
    info = invites.generate_invite(session.id)

    preview = invites.preview_by_code(info.code)

    assert preview.session_id == session.id
    assert preview.topic == "Chores"
    assert preview.initiator_name == "Alice"
    assert preview.status == "active"

    expire(db, session)
    assert invites.preview_by_code(info.code) is None
    assert invites.preview_by_code("UNKNOWN2") is None
