"""
求职申请 API 路由

- 求职者投递（multipart，简历 + 附加文件）
- 按角色查看申请
- 状态变更统一经过状态流转表
"""
from typing import List, Optional, Tuple
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile as StarletteUploadFile

from careers.core.config import settings
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
    MessageResponse,
    DictResponse,
)
from careers.core.security import can_access_application, get_current_user, require_roles
from careers.core.validators import require_fields
from careers.crud import application_crud, application_history_crud, job_crud
from careers.models import Application, ApplicationStatus, EmploymentType, User, UserRole
from careers.schemas.application import (
    ApplicationHistoryResponse,
    ApplicationResponse,
    StatusUpdateRequest,
    TransitionResponse,
)
from careers.schemas.interview import InterviewResponse
from careers.schemas.user import UserResponse
from careers.services import (
    application_with_history,
    change_application_status,
    get_email_service,
    has_content,
    list_applications_for,
    remove_uploads,
    save_uploads,
    transitions_for,
)

router = APIRouter()


def application_to_response(application: Application) -> dict:
    return ApplicationResponse.model_validate(application).model_dump()


async def get_accessible_application(db: AsyncSession, application_id: str, user: User) -> Application:
    """获取申请并校验访问权限"""
    application = await application_crud.get_detail(db, application_id)
    if application is None:
        raise NotFoundException("Application not found")
    if not can_access_application(user, application):
        raise ForbiddenException("Access denied")
    return application


async def _save_form_files(request: Request, resume: Optional[UploadFile], owner_id: str) -> Tuple[Optional[str], List[str]]:
    """
    保存简历与 additionalFile_0 ... additionalFile_N 字段中的附加文件

    Returns:
        (简历文件ID, 附加文件ID列表)
    """
    uploads = []
    if has_content(resume):
        uploads.append(("resume", resume))
    form = await request.form()
    for i in range(settings.max_additional_files):
        upload = form.get(f"additionalFile_{i}")
        if isinstance(upload, StarletteUploadFile) and has_content(upload):
            uploads.append((f"additional_{i}", upload))

    saved = await save_uploads(uploads, owner_id=owner_id)
    resume_id = saved.pop("resume", None)
    return resume_id, list(saved.values())


@router.get("", summary="获取申请列表", response_model=PagedResponseModel[ApplicationResponse])
async def get_applications(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    status: Optional[ApplicationStatus] = Query(None, description="状态筛选"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    获取申请列表（含状态历史）

    ADMIN 全部，HR 自己岗位下的，求职者自己的
    """
    items, total = await list_applications_for(
        db, current_user,
        skip=(page - 1) * page_size,
        limit=page_size,
        status=status.value if status else None,
    )
    return paged_response([application_to_response(a) for a in items], total, page, page_size)


@router.post(
    "",
    summary="投递申请",
    status_code=201,
    response_model=ResponseModel[ApplicationResponse],
)
async def create_application(
    request: Request,
    job_id: Optional[str] = Form(None, description="岗位ID"),
    cover_letter: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    education: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    expected_salary: Optional[str] = Form(None),
    references: Optional[str] = Form(None),
    employment_type: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None, description="简历"),
    current_user: User = Depends(require_roles(UserRole.APPLICANT)),
    db: AsyncSession = Depends(get_db),
):
    """
    投递申请

    - 岗位必须存在且开放
    - 同一岗位下已有未被拒绝的申请时返回 409
    - 附加文件字段为 additionalFile_0 ... additionalFile_9
    """
    require_fields(job_id=job_id)

    job = await job_crud.get(db, job_id)
    if not job or not job.is_active:
        raise NotFoundException("Job not found or inactive")

    if await application_crud.get_open_for_applicant_job(db, applicant_id=current_user.id, job_id=job.id):
        raise ConflictException("You already have an active application for this job")

    if employment_type:
        try:
            employment_type = EmploymentType(employment_type).value
        except ValueError:
            raise BadRequestException(f"Invalid employment type: {employment_type}")
    else:
        employment_type = EmploymentType.FULL_TIME.value

    resume_url, additional_files = await _save_form_files(request, resume, current_user.id)

    try:
        application = await application_crud.create(db, obj_in={
            "applicant_id": current_user.id,
            "job_id": job.id,
            "job_title": job.title,
            "employment_type": employment_type,
            "status": ApplicationStatus.PENDING.value,
            "resume_url": resume_url,
            "additional_files": additional_files,
            "cover_letter": cover_letter or "",
            "expected_salary": expected_salary or "No base",
            "experience": experience or "",
            "education": education or "",
            "skills": skills or "",
            "availability": availability or "",
            "references": references or "",
        })
        application = await application_with_history(db, application.id)

        await get_email_service().send_application_submission_email(db, application)
    except Exception:
        remove_uploads([resume_url, *additional_files] if resume_url else additional_files)
        raise

    logger.info(f"Application submitted: {application.id} ({job.title}) by {current_user.email}")

    return success_response(
        data=application_to_response(application),
        message="Application submitted successfully",
        code=201
    )


@router.get("/{application_id}", summary="获取申请详情", response_model=ResponseModel[ApplicationResponse])
async def get_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await get_accessible_application(db, application_id, current_user)
    return success_response(data=application_to_response(application))


@router.put("/{application_id}", summary="更新申请内容", response_model=ResponseModel[ApplicationResponse])
async def update_application(
    application_id: str,
    request: Request,
    cover_letter: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    education: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    availability: Optional[str] = Form(None),
    expected_salary: Optional[str] = Form(None),
    references: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    求职者修改自己的申请内容

    空字段保持原值；上传了新的附加文件时整体替换原附加文件
    """
    application = await get_accessible_application(db, application_id, current_user)
    if application.applicant_id != current_user.id:
        raise ForbiddenException("Only the applicant can update application content")

    update_data = {
        "cover_letter": cover_letter,
        "experience": experience,
        "education": education,
        "skills": skills,
        "availability": availability,
        "expected_salary": expected_salary,
        "references": references,
    }
    update_data = {k: v for k, v in update_data.items() if v}

    resume_url, additional_files = await _save_form_files(request, resume, current_user.id)
    if resume_url:
        update_data["resume_url"] = resume_url
    if additional_files:
        update_data["additional_files"] = additional_files

    try:
        await application_crud.update(db, db_obj=application, obj_in=update_data)
        application = await application_with_history(db, application_id)
    except Exception:
        remove_uploads([resume_url, *additional_files] if resume_url else additional_files)
        raise

    return success_response(
        data=application_to_response(application),
        message="Application updated successfully"
    )


@router.delete("/{application_id}", summary="撤回申请", response_model=MessageResponse)
async def delete_application(
    application_id: str,
    current_user: User = Depends(require_roles(UserRole.APPLICANT)),
    db: AsyncSession = Depends(get_db),
):
    """撤回申请，仅限本人且申请仍为 PENDING"""
    application = await application_crud.get(db, application_id)
    if not application:
        raise NotFoundException("Application not found")
    if application.applicant_id != current_user.id:
        raise ForbiddenException("Access denied")
    if application.status != ApplicationStatus.PENDING.value:
        raise BadRequestException("Cannot delete application that has been processed")

    await application_crud.delete(db, id=application_id)
    logger.info(f"Application withdrawn: {application_id} by {current_user.email}")
    return success_response(message="Application deleted successfully")


@router.patch("/{application_id}/status", summary="变更申请状态", response_model=ResponseModel[ApplicationResponse])
async def update_application_status(
    application_id: str,
    data: StatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    变更申请状态

    status 与 action 必须同时提供，并与流转表中的规则一致
    """
    if data.status is None or not data.action:
        raise BadRequestException("Missing required fields: status and action are required")

    application = await get_accessible_application(db, application_id, current_user)
    application = await change_application_status(
        db,
        application,
        target=data.status,
        action=data.action,
        actor=current_user,
        notes=data.notes,
    )
    return success_response(
        data=application_to_response(application),
        message="Application status updated successfully"
    )


@router.get(
    "/{application_id}/history",
    summary="获取状态历史",
    response_model=ResponseModel[List[ApplicationHistoryResponse]],
)
async def get_application_history(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await get_accessible_application(db, application_id, current_user)
    history = await application_history_crud.get_by_application(db, application_id)
    return success_response(
        data=[ApplicationHistoryResponse.model_validate(h).model_dump() for h in history]
    )


@router.get(
    "/{application_id}/transitions",
    summary="获取可执行的状态流转",
    response_model=ResponseModel[List[TransitionResponse]],
)
async def get_application_transitions(
    application_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    application = await get_accessible_application(db, application_id, current_user)
    return success_response(data=[t.to_dict() for t in transitions_for(application, current_user)])


@router.get("/{application_id}/applicant", summary="获取申请人完整资料", response_model=DictResponse)
async def get_application_applicant(
    application_id: str,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """HR / 管理员查看申请人资料及该申请下的面试与评估"""
    application = await get_accessible_application(db, application_id, current_user)
    return success_response(data={
        "applicant": UserResponse.model_validate(application.applicant).model_dump(),
        "application": application_to_response(application),
        "interviews": [InterviewResponse.model_validate(i).model_dump() for i in application.interviews],
    })
