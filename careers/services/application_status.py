"""
申请状态服务

所有对 Application.status 的修改都经过 change_application_status：
按流转表校验，然后在当前请求的事务中同时写入
申请状态、一条状态历史、一条站内通知。
"""
from typing import List, Optional, Union

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.exceptions import NotFoundException
from careers.crud import application_crud, application_history_crud, notification_crud
from careers.models import Application, ApplicationStatus, User
from .email_service import get_email_service
from .status_transitions import StatusTransition, available_transitions, validate_transition


S = ApplicationStatus

NOTIFICATION_TITLES = {
    S.PENDING: "Application Received",
    S.UNDER_REVIEW: "Application Under Review",
    S.INTERVIEW_SCHEDULED: "Interview Scheduled",
    S.INTERVIEW_COMPLETED: "Interview Completed",
    S.ACCEPTED: "Application Accepted",
    S.REJECTED: "Application Update",
    S.HIRED: "Congratulations! You're Hired!",
}

NOTIFICATION_MESSAGES = {
    S.PENDING: "Your application for {job_title} has been received and is being processed.",
    S.UNDER_REVIEW: "Your application for {job_title} is now under review. We'll get back to you soon!",
    S.INTERVIEW_SCHEDULED: (
        "Great news! We'd like to schedule an interview for your {job_title} application. "
        "Check your email for details."
    ),
    S.INTERVIEW_COMPLETED: (
        "Your interview for {job_title} has been completed. "
        "We'll review the results and get back to you."
    ),
    S.ACCEPTED: (
        "Congratulations! Your application for {job_title} has been accepted. "
        "We'll be in touch with next steps."
    ),
    S.REJECTED: (
        "Thank you for your interest in {job_title}. "
        "Unfortunately, we've decided to move forward with other candidates."
    ),
    S.HIRED: (
        "Welcome to the team! You've been hired for the {job_title} position. "
        "We're excited to have you on board!"
    ),
}

# 处于这些状态时候选人已参加过面试，拒绝邮件措辞不同
INTERVIEWED_STATUSES = frozenset({S.INTERVIEW_COMPLETED, S.ACCEPTED})


def notification_title(status: ApplicationStatus) -> str:
    return NOTIFICATION_TITLES.get(status, "Application Status Updated")


def notification_message(status: ApplicationStatus, job_title: str) -> str:
    template = NOTIFICATION_MESSAGES.get(status, "Your application status for {job_title} has been updated.")
    return template.format(job_title=job_title)


async def change_application_status(
    db: AsyncSession,
    application: Application,
    *,
    target: Union[ApplicationStatus, str],
    action: Optional[str],
    actor: User,
    notes: Optional[str] = None
) -> Application:
    """
    变更申请状态

    Args:
        application: 待变更的申请
        target: 目标状态
        action: 动作名，必须与流转表中的动作一致
        actor: 执行人（其角色参与校验）
        notes: 备注，写入历史

    Returns:
        带最新历史的申请

    Raises:
        InvalidTransitionError: 非法流转 (400)
        TransitionForbiddenError: 角色无权执行 (403)
    """
    current = ApplicationStatus(application.status)
    transition = validate_transition(current, target, actor.role, action)
    target = transition.to_status

    application.status = target.value

    await application_history_crud.create(db, obj_in={
        "application_id": application.id,
        "from_status": current.value,
        "to_status": target.value,
        "action": transition.action,
        "performed_by": actor.id,
        "performed_by_name": actor.full_name or "Unknown User",
        "performed_by_role": actor.role,
        "notes": notes,
    })
    await notification_crud.create(db, obj_in={
        "user_id": application.applicant_id,
        "title": notification_title(target),
        "message": notification_message(target, application.job_title),
        "type": "in-app",
        "application_id": application.id,
    })

    logger.info(
        f"Application {application.id}: {current.value} -> {target.value} "
        f"({transition.action}) by {actor.email} [{actor.role}]"
    )

    email_service = get_email_service()
    if target == S.REJECTED:
        await email_service.send_rejection_email(
            db, application, was_interviewed=current in INTERVIEWED_STATUSES
        )
    elif target == S.HIRED:
        await email_service.send_hired_email(db, application, decided_by=actor)

    return await application_with_history(db, application.id)


async def application_with_history(db: AsyncSession, application_id: str) -> Application:
    """获取申请及其完整状态历史（最新在前）"""
    application = await application_crud.get_detail(db, application_id)
    if application is None:
        raise NotFoundException("Application not found")
    return application


async def list_applications_for(
    db: AsyncSession,
    user: User,
    *,
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None
) -> tuple[List[Application], int]:
    """按角色列出申请：ADMIN 全部，HR 自己岗位下的，APPLICANT 自己的"""
    items = await application_crud.get_multi_for_user(db, user, skip=skip, limit=limit, status=status)
    total = await application_crud.count_for_user(db, user, status=status)
    return items, total


def transitions_for(application: Application, user: User) -> List[StatusTransition]:
    """当前用户对该申请可执行的流转"""
    return available_transitions(application.status, user.role)
