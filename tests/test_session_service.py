import pytest
from sqlalchemy import DateTime
from sqlmodel import Session

from mediator_api.errors import ForbiddenError, NotFoundError, StageTransitionError, StatusTransitionError
from mediator_api.models import (
    MediationSession,
    MediatorSettings,
    Partnership,
    SessionMessage,
    SessionParticipant,
)
from mediator_api.models.participant import ParticipantRole
from mediator_api.services.partnership_service import PartnershipService
from mediator_api.services.participant_service import ParticipantService
from mediator_api.services.session_service import SessionService
from mediator_api.utils.clock import utc_now
from mediator_api.utils.metrics import metrics_collector


def test_create_session_starts_at_intake_and_active(db):
    service = SessionService(db)

    session = service.create_session(None, "alice", "Chores", display_name="Alice")

    assert session.stage == "intake"
    assert session.status == "active"
    assert session.session_mode == "solo"
    assert session.partnership_id is None
    assert metrics_collector.get_metrics()["counters"]["sessions_created_total"] == 1


def test_create_session_registers_initiator_as_first_participant(db):
    session = SessionService(db).create_session(None, "alice", "Chores", display_name="Alice")

    participants = ParticipantService(db).get_participants(session.id)
    assert len(participants) == 1
    assert participants[0].user_id == "alice"
    assert participants[0].slot == 1
    assert participants[0].role == ParticipantRole.INITIATOR.value
    assert participants[0].display_name == "Alice"


def test_create_session_in_partnership_requires_membership(db):
    partnership = PartnershipService(db).create_partnership("alice")
    service = SessionService(db)

    session = service.create_session(partnership.id, "alice", "Budget")
    assert session.partnership_id == partnership.id

    with pytest.raises(ForbiddenError):
        service.create_session(partnership.id, "mallory", "Budget")

    with pytest.raises(NotFoundError):
        service.create_session("missing", "alice", "Budget")


def test_require_session_unknown_id(db):
    with pytest.raises(NotFoundError):
        SessionService(db).require_session("does-not-exist")


def test_update_stage_advances_one_step(db):
    service = SessionService(db)
    session = service.create_session(None, "alice", "Chores")

    updated = service.update_stage(session.id, "person_a_observation")

    assert updated.stage == "person_a_observation"
    assert updated.updated_at >= session.created_at


def test_update_stage_rejects_skips_and_regressions(db):
    service = SessionService(db)
    session = service.create_session(None, "alice", "Chores")
    service.update_stage(session.id, "person_a_observation")

    with pytest.raises(StageTransitionError):
        service.update_stage(session.id, "person_a_need")
    with pytest.raises(StageTransitionError):
        service.update_stage(session.id, "intake")

    assert service.require_session(session.id).stage == "person_a_observation"


def test_update_status_follows_lifecycle(db):
    service = SessionService(db)
    session = service.create_session(None, "alice", "Chores")

    assert service.update_status(session.id, "paused").status == "paused"
    assert service.update_status(session.id, "active").status == "active"
    assert service.update_status(session.id, "completed").status == "completed"

    with pytest.raises(StatusTransitionError):
        service.update_status(session.id, "active")


def test_get_user_sessions_includes_joined_sessions(db):
    service = SessionService(db)
    own = service.create_session(None, "alice", "Chores")
    other = service.create_session(None, "bob", "Dishes")
    service.create_session(None, "carol", "Unrelated")

    ParticipantService(db).add_partner(other.id, "alice", "Alice")
    db.commit()

    ids = {session.id for session in service.get_user_sessions("alice")}
    assert ids == {own.id, other.id}


def test_get_session_counts(db):
    service = SessionService(db)
    first = service.create_session(None, "alice", "One")
    second = service.create_session(None, "alice", "Two")
    service.create_session(None, "alice", "Three")
    service.update_status(first.id, "paused")
    service.update_status(second.id, "completed")

    counts = service.get_session_counts("alice")

    assert counts == {"active": 1, "paused": 1, "completed": 1, "total": 3}


@pytest.mark.parametrize(
    "model",
    [MediationSession, SessionMessage, SessionParticipant, Partnership, MediatorSettings],
)
def test_timestamp_columns_store_naive_utc(model):
    columns = [column for column in model.__table__.columns if isinstance(column.type, DateTime)]

    assert columns
    for column in columns:
        assert column.type.timezone is False, column.name


def test_timestamps_persist_and_reload_as_utc(engine):
    before = utc_now()
    with Session(engine) as db:
        session = SessionService(db).create_session(None, "alice", "Chores")
        session_id = session.id

    with Session(engine) as db:
        reloaded = SessionService(db).require_session(session_id)
        joined = ParticipantService(db).get_participants(session_id)[0].joined_at

    assert reloaded.created_at.tzinfo is None
    assert before <= reloaded.created_at <= utc_now()
    assert reloaded.updated_at >= reloaded.created_at
    assert before <= joined <= utc_now()
