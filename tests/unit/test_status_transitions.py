"""
申请状态流转表单元测试

不依赖数据库，逐格覆盖 (原状态, 目标状态, 角色)
"""
import itertools

import pytest

from careers.models import ApplicationStatus as S, UserRole
from careers.services.status_transitions import (
    TRANSITIONS,
    InvalidTransitionError,
    TransitionForbiddenError,
    available_transitions,
    stage_ordinal,
    validate_transition,
)

# (原状态, 目标状态) -> (动作, 允许角色)
EXPECTED = {
    (S.PENDING, S.UNDER_REVIEW): ("START_REVIEW", {UserRole.HR, UserRole.ADMIN}),
    (S.PENDING, S.REJECTED): ("REJECT_APPLICATION", {UserRole.HR, UserRole.ADMIN}),
    (S.UNDER_REVIEW, S.INTERVIEW_SCHEDULED): ("SCHEDULE_INTERVIEW", {UserRole.HR, UserRole.ADMIN}),
    (S.UNDER_REVIEW, S.REJECTED): ("REJECT_AFTER_REVIEW", {UserRole.HR, UserRole.ADMIN}),
    (S.INTERVIEW_SCHEDULED, S.INTERVIEW_COMPLETED): ("COMPLETE_INTERVIEW", {UserRole.HR, UserRole.ADMIN}),
    (S.INTERVIEW_SCHEDULED, S.REJECTED): ("REJECT_AFTER_INTERVIEW", {UserRole.HR, UserRole.ADMIN}),
    (S.INTERVIEW_COMPLETED, S.ACCEPTED): ("ACCEPT_CANDIDATE", {UserRole.HR, UserRole.ADMIN}),
    (S.INTERVIEW_COMPLETED, S.REJECTED): ("REJECT_AFTER_INTERVIEW_COMPLETION", {UserRole.HR, UserRole.ADMIN}),
    (S.ACCEPTED, S.HIRED): ("HIRE_CANDIDATE", {UserRole.ADMIN}),
    (S.ACCEPTED, S.REJECTED): ("FINAL_REJECT", {UserRole.ADMIN}),
}

GRID = list(itertools.product(list(S), list(S), list(UserRole)))


def test_table_matches_expected_rules():
    table = {(t.from_status, t.to_status): (t.action, set(t.allowed_roles)) for t in TRANSITIONS}
    assert table == EXPECTED


@pytest.mark.parametrize("current,target,role", GRID)
def test_validate_transition_grid(current, target, role):
    """每个 (原状态, 目标状态, 角色) 组合：合法放行，无权 403，非法 400"""
    rule = EXPECTED.get((current, target))
    if rule is None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            validate_transition(current, target, role)
        assert exc_info.value.code == 400
    elif role not in rule[1]:
        with pytest.raises(TransitionForbiddenError) as exc_info:
            validate_transition(current, target, role, rule[0])
        assert exc_info.value.code == 403
    else:
        transition = validate_transition(current, target, role, rule[0])
        assert transition.action == rule[0]
        assert transition.to_status == target


def test_same_status_is_rejected():
    with pytest.raises(InvalidTransitionError, match="already in PENDING"):
        validate_transition(S.PENDING, S.PENDING, UserRole.ADMIN)


def test_skipping_a_stage_is_rejected():
    with pytest.raises(InvalidTransitionError):
        validate_transition(S.PENDING, S.INTERVIEW_SCHEDULED, UserRole.ADMIN)


@pytest.mark.parametrize("terminal", [S.REJECTED, S.HIRED])
def test_terminal_statuses_cannot_move(terminal):
    for target in S:
        if target == terminal:
            continue
        with pytest.raises(InvalidTransitionError):
            validate_transition(terminal, target, UserRole.ADMIN)


def test_action_must_match_the_rule():
    with pytest.raises(InvalidTransitionError, match="does not match"):
        validate_transition(S.PENDING, S.UNDER_REVIEW, UserRole.HR, "REJECT_APPLICATION")


def test_hr_cannot_hire():
    with pytest.raises(TransitionForbiddenError):
        validate_transition(S.ACCEPTED, S.HIRED, UserRole.HR, "HIRE_CANDIDATE")


def test_applicant_cannot_start_review():
    with pytest.raises(TransitionForbiddenError):
        validate_transition(S.PENDING, S.UNDER_REVIEW, UserRole.APPLICANT, "START_REVIEW")


def test_accepts_plain_strings():
    transition = validate_transition("PENDING", "UNDER_REVIEW", "HR", "START_REVIEW")
    assert transition.action == "START_REVIEW"


def test_unknown_status_is_invalid():
    with pytest.raises(InvalidTransitionError, match="Unknown application status"):
        validate_transition("PENDING", "ARCHIVED", UserRole.ADMIN)


def test_stage_ordinal():
    assert stage_ordinal(S.PENDING) == 0
    assert stage_ordinal(S.HIRED) == 5
    assert stage_ordinal(S.REJECTED) is None


def test_available_transitions_by_role():
    assert {t.action for t in available_transitions(S.ACCEPTED, UserRole.ADMIN)} == {
        "HIRE_CANDIDATE", "FINAL_REJECT"
    }
    assert available_transitions(S.ACCEPTED, UserRole.HR) == []
    assert available_transitions(S.PENDING, UserRole.APPLICANT) == []
    assert available_transitions(S.HIRED, UserRole.ADMIN) == []


def test_rules_to_dict():
    data = TRANSITIONS[0].to_dict()
    assert data["from_status"] == "PENDING"
    assert data["to_status"] == "UNDER_REVIEW"
    assert data["allowed_roles"] == ["HR", "ADMIN"]
    assert data["requires_confirmation"] is False
