"""
面试 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.exceptions import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from careers.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    DictResponse,
)
from careers.core.security import can_access_application, get_current_user, require_roles
from careers.crud import application_crud, interview_crud, interview_review_crud, notification_crud
from careers.models import (
    ApplicationStatus,
    Interview,
    InterviewStatus,
    User,
    UserRole,
)
from careers.schemas.application import ApplicationResponse
from careers.schemas.interview import (
    EvaluationCreate,
    InterviewCreate,
    InterviewResponse,
    InterviewReviewResponse,
    InterviewStatusUpdate,
)
from careers.services import change_application_status, get_email_service

router = APIRouter()

RATING_FIELDS = ("technical_skills", "communication", "cultural_fit", "overall_rating")


def interview_to_response(interview: Interview) -> dict:
    return InterviewResponse.model_validate(interview).model_dump()


def can_access_interview(user: User, interview: Interview) -> bool:
    """
    面试可见性

    - ADMIN: 全部
    - HR: 自己岗位下的面试或自己安排的面试
    - APPLICANT: 自己的面试
    """
    if user.role == UserRole.ADMIN.value:
        return True
    if user.role == UserRole.HR.value:
        return interview.scheduled_by_id == user.id or can_access_application(user, interview.application)
    return interview.candidate_id == user.id


async def get_accessible_interview(db: AsyncSession, interview_id: str, user: User) -> Interview:
    interview = await interview_crud.get_detail(db, interview_id)
    if interview is None:
        raise NotFoundException("Interview not found")
    if not can_access_interview(user, interview):
        raise ForbiddenException("Access denied")
    return interview


@router.get("", summary="获取面试列表", response_model=PagedResponseModel[InterviewResponse])
async def get_interviews(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    status: Optional[InterviewStatus] = Query(None, description="面试状态"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    status_value = status.value if status else None
    interviews = await interview_crud.get_multi_for_user(
        db, current_user, skip=(page - 1) * page_size, limit=page_size, status=status_value
    )
    total = await interview_crud.count_for_user(db, current_user, status=status_value)
    return paged_response([interview_to_response(i) for i in interviews], total, page, page_size)


@router.post(
    "",
    summary="安排面试",
    status_code=201,
    response_model=ResponseModel[InterviewResponse],
)
async def schedule_interview(
    data: InterviewCreate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """
    安排面试

    - 申请处于 UNDER_REVIEW：按流转表推进到 INTERVIEW_SCHEDULED
    - 申请已是 INTERVIEW_SCHEDULED：视为改期，原面试置为 CANCELLED
    - 其他状态返回 400
    """
    application = await application_crud.get_detail(db, data.application_id)
    if application is None:
        raise NotFoundException("Application not found")
    if not can_access_application(current_user, application):
        raise ForbiddenException("Access denied")

    if application.status == ApplicationStatus.UNDER_REVIEW.value:
        application = await change_application_status(
            db,
            application,
            target=ApplicationStatus.INTERVIEW_SCHEDULED,
            action="SCHEDULE_INTERVIEW",
            actor=current_user,
            notes=data.notes,
        )
    elif application.status == ApplicationStatus.INTERVIEW_SCHEDULED.value:
        previous = await interview_crud.get_active_for_application(db, application.id)
        if previous is not None:
            previous.status = InterviewStatus.CANCELLED.value
            logger.info(f"Interview {previous.id} cancelled for reschedule")
    else:
        raise BadRequestException(
            f"Cannot schedule an interview for an application in {application.status} status"
        )

    interview = await interview_crud.create(db, obj_in={
        "application_id": application.id,
        "candidate_id": application.applicant_id,
        "scheduled_by_id": current_user.id,
        "scheduled_at": data.scheduled_at,
        "duration_minutes": data.duration_minutes,
        "interview_type": data.interview_type.value,
        "location": data.location,
        "meeting_link": data.meeting_link,
        "interviewer": data.interviewer,
        "notes": data.notes,
        "status": InterviewStatus.SCHEDULED.value,
    })

    await get_email_service().send_interview_scheduled_email(db, application, interview)
    logger.info(f"Interview scheduled: {interview.id} for application {application.id}")

    interview = await interview_crud.get_detail(db, interview.id)
    return success_response(
        data=interview_to_response(interview),
        message="Interview scheduled successfully",
        code=201
    )


@router.get("/{interview_id}", summary="获取面试详情", response_model=ResponseModel[InterviewResponse])
async def get_interview(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    interview = await get_accessible_interview(db, interview_id, current_user)
    return success_response(data=interview_to_response(interview))


@router.patch("/{interview_id}/status", summary="更新面试状态", response_model=ResponseModel[InterviewResponse])
async def update_interview_status(
    interview_id: str,
    data: InterviewStatusUpdate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """
    更新面试状态

    标记为 COMPLETED 时，申请按流转表从 INTERVIEW_SCHEDULED 推进到 INTERVIEW_COMPLETED
    """
    interview = await get_accessible_interview(db, interview_id, current_user)
    if interview.status != InterviewStatus.SCHEDULED.value:
        raise BadRequestException(f"Interview is already {interview.status}")

    if data.status == InterviewStatus.COMPLETED:
        application = interview.application
        if application.status == ApplicationStatus.INTERVIEW_SCHEDULED.value:
            await change_application_status(
                db,
                application,
                target=ApplicationStatus.INTERVIEW_COMPLETED,
                action="COMPLETE_INTERVIEW",
                actor=current_user,
                notes=data.notes,
            )

    update_data = {"status": data.status.value}
    if data.notes:
        update_data["notes"] = data.notes
    await interview_crud.update(db, db_obj=interview, obj_in=update_data)

    interview = await interview_crud.get_detail(db, interview_id)
    return success_response(
        data=interview_to_response(interview),
        message="Interview status updated successfully"
    )


@router.post(
    "/{interview_id}/evaluation",
    summary="提交面试评估",
    status_code=201,
    response_model=DictResponse,
)
async def submit_evaluation(
    interview_id: str,
    data: EvaluationCreate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """
    提交面试评估

    - 四项评分均为 1-5
    - 面试必须已完成，每位评估人只能评估一次
    - 推荐结论且申请处于 INTERVIEW_COMPLETED 时自动通过（ACCEPT_CANDIDATE）
    - 通知候选人评估已完成
    """
    interview = await get_accessible_interview(db, interview_id, current_user)

    if any(not 1 <= getattr(data, field) <= 5 for field in RATING_FIELDS):
        raise BadRequestException("All ratings must be between 1 and 5")
    if interview.status != InterviewStatus.COMPLETED.value:
        raise BadRequestException("Interview must be completed before submitting evaluation")

    existing = await interview_review_crud.get_by_interview_and_reviewer(
        db, interview_id=interview.id, reviewer_id=current_user.id
    )
    if existing:
        raise ConflictException("You have already submitted an evaluation for this interview")

    review = await interview_review_crud.create(db, obj_in={
        "interview_id": interview.id,
        "hr_reviewer_id": current_user.id,
        "technical_skills": data.technical_skills,
        "communication": data.communication,
        "cultural_fit": data.cultural_fit,
        "overall_rating": data.overall_rating,
        "comments": data.comments,
        "recommendation": data.recommendation.value,
    })

    extra_notes = [
        f"{label}: {value}" for label, value in (
            ("Strengths", data.strengths),
            ("Areas for improvement", data.areas_for_improvement),
            ("Additional notes", data.additional_notes),
        ) if value
    ]
    if extra_notes:
        notes = "\n".join(extra_notes)
        interview.notes = f"{interview.notes}\n\n{notes}" if interview.notes else notes

    application = interview.application
    accepted = data.recommendation.is_positive and application.status == ApplicationStatus.INTERVIEW_COMPLETED.value
    if accepted:
        application = await change_application_status(
            db,
            application,
            target=ApplicationStatus.ACCEPTED,
            action="ACCEPT_CANDIDATE",
            actor=current_user,
            notes=f"Accepted after interview evaluation ({data.recommendation.value})",
        )

    outcome = "You have been accepted for the next stage." if accepted else "Thank you for your time."
    await notification_crud.create(db, obj_in={
        "user_id": interview.candidate_id,
        "title": "Interview Evaluation Completed",
        "message": f"Your interview evaluation has been completed. {outcome}",
        "type": "in-app",
        "application_id": application.id,
        "interview_id": interview.id,
    })
    logger.info(
        f"Evaluation submitted for interview {interview.id} by {current_user.email}: "
        f"{data.recommendation.value}"
    )

    application = await application_crud.get_detail(db, application.id)
    return success_response(
        data={
            "review": InterviewReviewResponse.model_validate(review).model_dump(),
            "application": ApplicationResponse.model_validate(application).model_dump(),
        },
        message="Evaluation submitted successfully",
        code=201
    )
