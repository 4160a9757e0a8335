"""
Conversation protocol state machine.

Stages advance one step at a time along the fixed NVC protocol and never move
backwards; `complete` is terminal. Session statuses follow a separate small
lifecycle where completed and abandoned are terminal.
"""

from typing import Dict, FrozenSet, List, Optional, Union

from mediator_api.errors import InvalidInputError, StageTransitionError, StatusTransitionError
from mediator_api.models.session import SessionStage, SessionStatus

STAGE_ORDER: List[SessionStage] = list(SessionStage)

INITIAL_STAGE = SessionStage.INTAKE
FINAL_STAGE = SessionStage.COMPLETE

# current stage -> legal next stages
STAGE_TRANSITIONS: Dict[SessionStage, FrozenSet[SessionStage]] = {
    stage: frozenset({STAGE_ORDER[index + 1]}) if index + 1 < len(STAGE_ORDER) else frozenset()
    for index, stage in enumerate(STAGE_ORDER)
}

STATUS_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.ACTIVE: frozenset({SessionStatus.PAUSED, SessionStatus.COMPLETED, SessionStatus.ABANDONED}),
    SessionStatus.PAUSED: frozenset({SessionStatus.ACTIVE, SessionStatus.COMPLETED, SessionStatus.ABANDONED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.ABANDONED: frozenset(),
}


def parse_stage(value: Union[str, SessionStage]) -> SessionStage:
    """Convert a raw value to a SessionStage, rejecting anything outside the protocol."""
    try:
        return SessionStage(value)
    except ValueError:
        raise InvalidInputError(
            f"Unknown session stage: {value!r}",
            details={"field": "stage", "allowed": [s.value for s in STAGE_ORDER]},
        )


def parse_status(value: Union[str, SessionStatus]) -> SessionStatus:
    try:
        return SessionStatus(value)
    except ValueError:
        raise InvalidInputError(
            f"Unknown session status: {value!r}",
            details={"field": "status", "allowed": [s.value for s in SessionStatus]},
        )


def next_stage(stage: Union[str, SessionStage]) -> Optional[SessionStage]:
    """The stage after `stage`, or None when the protocol is finished."""
    successors = STAGE_TRANSITIONS[parse_stage(stage)]
    return next(iter(successors), None)


def is_terminal(stage: Union[str, SessionStage]) -> bool:
    return not STAGE_TRANSITIONS[parse_stage(stage)]


def can_advance(current: Union[str, SessionStage], target: Union[str, SessionStage]) -> bool:
    return parse_stage(target) in STAGE_TRANSITIONS[parse_stage(current)]


def validate_stage_transition(current: Union[str, SessionStage], target: Union[str, SessionStage]) -> SessionStage:
    """Return the target stage if the move is legal, otherwise raise StageTransitionError."""
    current_stage = parse_stage(current)
    target_stage = parse_stage(target)

    if target_stage not in STAGE_TRANSITIONS[current_stage]:
        raise StageTransitionError(
            f"Cannot move session from '{current_stage.value}' to '{target_stage.value}'",
            details={
                "current": current_stage.value,
                "requested": target_stage.value,
                "allowed": sorted(s.value for s in STAGE_TRANSITIONS[current_stage]),
            },
        )
    return target_stage


def validate_status_transition(current: Union[str, SessionStatus], target: Union[str, SessionStatus]) -> SessionStatus:
    current_status = parse_status(current)
    target_status = parse_status(target)

    if target_status not in STATUS_TRANSITIONS[current_status]:
        raise StatusTransitionError(
            f"Cannot change session status from '{current_status.value}' to '{target_status.value}'",
            details={
                "current": current_status.value,
                "requested": target_status.value,
                "allowed": sorted(s.value for s in STATUS_TRANSITIONS[current_status]),
            },
        )
    return target_status
