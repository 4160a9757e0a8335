import pytest

from mediator_api.errors import ConflictError, InvalidInputError, StageTransitionError, StatusTransitionError
from mediator_api.models.session import SessionStage, SessionStatus
from mediator_api.services.stage_machine import (
    FINAL_STAGE,
    INITIAL_STAGE,
    STAGE_ORDER,
    can_advance,
    is_terminal,
    next_stage,
    parse_stage,
    validate_stage_transition,
    validate_status_transition,
)


def test_protocol_has_fourteen_stages_in_order():
    assert len(STAGE_ORDER) == 14
    assert STAGE_ORDER[0] == INITIAL_STAGE == SessionStage.INTAKE
    assert STAGE_ORDER[-1] == FINAL_STAGE == SessionStage.COMPLETE
    assert STAGE_ORDER[5] == SessionStage.REFLECTION_A
    assert STAGE_ORDER[10] == SessionStage.REFLECTION_B


def test_next_stage_walks_the_whole_protocol():
    stage = INITIAL_STAGE
    visited = [stage]
    while next_stage(stage) is not None:
        stage = next_stage(stage)
        visited.append(stage)
    assert visited == STAGE_ORDER


def test_complete_is_terminal():
    assert is_terminal("complete")
    assert next_stage(SessionStage.COMPLETE) is None
    assert not is_terminal("agreement")


def test_only_the_successor_is_legal():
    assert can_advance("intake", "person_a_observation")
    assert not can_advance("intake", "person_a_feeling")
    assert not can_advance("person_a_feeling", "person_a_observation")
    assert not can_advance("intake", "intake")


def test_skipping_a_stage_raises_conflict():
    with pytest.raises(StageTransitionError) as exc_info:
        validate_stage_transition("intake", "common_ground")

    assert isinstance(exc_info.value, ConflictError)
    assert exc_info.value.details["allowed"] == ["person_a_observation"]


def test_leaving_complete_is_rejected():
    with pytest.raises(StageTransitionError):
        validate_stage_transition("complete", "intake")


def test_unknown_stage_is_invalid_input():
    with pytest.raises(InvalidInputError):
        parse_stage("person_c_observation")
    with pytest.raises(InvalidInputError):
        validate_stage_transition("intake", "bogus")


@pytest.mark.parametrize(
    "current,target",
    [
        ("active", "paused"),
        ("paused", "active"),
        ("active", "completed"),
        ("paused", "abandoned"),
    ],
)
def test_allowed_status_changes(current, target):
    assert validate_status_transition(current, target) == SessionStatus(target)


@pytest.mark.parametrize(
    "current,target",
    [
        ("completed", "active"),
        ("abandoned", "paused"),
        ("active", "active"),
    ],
)
def test_rejected_status_changes(current, target):
    with pytest.raises(StatusTransitionError):
        validate_status_transition(current, target)
