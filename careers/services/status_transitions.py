"""
申请状态流转表

固定的 (原状态, 目标状态, 动作, 允许角色) 表，以及合法性校验。
本模块不访问数据库，状态写入见 application_status。
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from careers.core.exceptions import BadRequestException, ForbiddenException
from careers.models import ApplicationStatus, UserRole


class InvalidTransitionError(BadRequestException):
    """非法的状态流转（400）"""
    pass


class TransitionForbiddenError(ForbiddenException):
    """当前角色无权执行该流转（403）"""
    pass


@dataclass(frozen=True)
class StatusTransition:
    """一条状态流转规则"""
    from_status: ApplicationStatus
    to_status: ApplicationStatus
    action: str
    allowed_roles: Tuple[UserRole, ...]
    requires_confirmation: bool
    description: str
    confirmation_message: Optional[str] = None

    def allows(self, role) -> bool:
        return _as_role(role) in self.allowed_roles

    def to_dict(self) -> dict:
        return {
            "from_status": self.from_status.value,
            "to_status": self.to_status.value,
            "action": self.action,
            "allowed_roles": [role.value for role in self.allowed_roles],
            "requires_confirmation": self.requires_confirmation,
            "description": self.description,
            "confirmation_message": self.confirmation_message,
        }


S = ApplicationStatus
HR_OR_ADMIN = (UserRole.HR, UserRole.ADMIN)
ADMIN_ONLY = (UserRole.ADMIN,)

TRANSITIONS: Tuple[StatusTransition, ...] = (
    StatusTransition(
        S.PENDING, S.UNDER_REVIEW, "START_REVIEW", HR_OR_ADMIN,
        requires_confirmation=False,
        description="Start reviewing the application",
    ),
    StatusTransition(
        S.PENDING, S.REJECTED, "REJECT_APPLICATION", HR_OR_ADMIN,
        requires_confirmation=True,
        description="Reject the application",
        confirmation_message="Are you sure you want to reject this application?",
    ),
    StatusTransition(
        S.UNDER_REVIEW, S.INTERVIEW_SCHEDULED, "SCHEDULE_INTERVIEW", HR_OR_ADMIN,
        requires_confirmation=False,
        description="Schedule an interview with the candidate",
    ),
    StatusTransition(
        S.UNDER_REVIEW, S.REJECTED, "REJECT_AFTER_REVIEW", HR_OR_ADMIN,
        requires_confirmation=True,
        description="Reject the application after review",
        confirmation_message="Are you sure you want to reject this application after review?",
    ),
    StatusTransition(
        S.INTERVIEW_SCHEDULED, S.INTERVIEW_COMPLETED, "COMPLETE_INTERVIEW", HR_OR_ADMIN,
        requires_confirmation=False,
        description="Mark interview as completed",
    ),
    StatusTransition(
        S.INTERVIEW_SCHEDULED, S.REJECTED, "REJECT_AFTER_INTERVIEW", HR_OR_ADMIN,
        requires_confirmation=True,
        description="Reject the candidate after interview",
        confirmation_message="Are you sure you want to reject this candidate after the interview?",
    ),
    StatusTransition(
        S.INTERVIEW_COMPLETED, S.ACCEPTED, "ACCEPT_CANDIDATE", HR_OR_ADMIN,
        requires_confirmation=True,
        description="Accept the candidate",
        confirmation_message="Are you sure you want to accept this candidate?",
    ),
    StatusTransition(
        S.INTERVIEW_COMPLETED, S.REJECTED, "REJECT_AFTER_INTERVIEW_COMPLETION", HR_OR_ADMIN,
        requires_confirmation=True,
        description="Reject the candidate after interview completion",
        confirmation_message="Are you sure you want to reject this candidate after interview completion?",
    ),
    StatusTransition(
        S.ACCEPTED, S.HIRED, "HIRE_CANDIDATE", ADMIN_ONLY,
        requires_confirmation=True,
        description="Hire the candidate",
        confirmation_message="Are you sure you want to hire this candidate?",
    ),
    StatusTransition(
        S.ACCEPTED, S.REJECTED, "FINAL_REJECT", ADMIN_ONLY,
        requires_confirmation=True,
        description="Reject the candidate at final approval",
        confirmation_message="Are you sure you want to reject this accepted candidate?",
    ),
)

# 阶段顺序，REJECTED 不在其中
STAGE_ORDER: Tuple[ApplicationStatus, ...] = (
    S.PENDING,
    S.UNDER_REVIEW,
    S.INTERVIEW_SCHEDULED,
    S.INTERVIEW_COMPLETED,
    S.ACCEPTED,
    S.HIRED,
)

TERMINAL_STATUSES = frozenset({S.REJECTED, S.HIRED})


def _as_status(value) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise InvalidTransitionError(f"Unknown application status: {value}")


def _as_role(value) -> Optional[UserRole]:
    try:
        return UserRole(value)
    except ValueError:
        return None


def stage_ordinal(status) -> Optional[int]:
    """阶段序号，REJECTED 返回 None"""
    status = _as_status(status)
    if status in STAGE_ORDER:
        return STAGE_ORDER.index(status)
    return None


def find_transition(current, target) -> list[StatusTransition]:
    """查找 (current, target) 对应的全部规则"""
    current, target = _as_status(current), _as_status(target)
    return [t for t in TRANSITIONS if t.from_status == current and t.to_status == target]


def available_transitions(current, role) -> list[StatusTransition]:
    """从 current 出发、该角色可执行的全部规则"""
    current = _as_status(current)
    return [t for t in TRANSITIONS if t.from_status == current and t.allows(role)]


def validate_transition(current, target, role, action: Optional[str] = None) -> StatusTransition:
    """
    校验一次状态流转

    校验顺序:
    1. 目标与当前状态相同 -> 400
    2. 阶段序号：非 REJECTED 目标只能前进一个阶段，终态不能再流转 -> 400
    3. 流转表中不存在该 (原状态, 目标状态, 动作) -> 400
    4. 角色不在允许列表 -> 403

    Returns:
        匹配的 StatusTransition
    """
    current, target = _as_status(current), _as_status(target)

    if current == target:
        raise InvalidTransitionError(f"Application is already in {current.value} status")

    illegal = f"Invalid status transition from {current.value} to {target.value}"
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(f"{illegal}: {current.value} is a final status")
    if target != S.REJECTED and stage_ordinal(target) != stage_ordinal(current) + 1:
        raise InvalidTransitionError(illegal)

    candidates = find_transition(current, target)
    if not candidates:
        raise InvalidTransitionError(illegal)
    if action is not None:
        candidates = [t for t in candidates if t.action == action]
        if not candidates:
            raise InvalidTransitionError(
                f"{illegal}: action {action} does not match this transition"
            )

    transition = candidates[0]
    if not transition.allows(role):
        raise TransitionForbiddenError(
            f"Role {getattr(role, 'value', role)} is not allowed to perform "
            f"{transition.action} ({current.value} -> {target.value})"
        )
    return transition
