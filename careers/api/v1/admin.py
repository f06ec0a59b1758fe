"""
管理后台 API 路由（仅 ADMIN）

- HR 用户与管理员账号管理
- HR 绩效
- 全局总览（只读）
- 系统设置、邮件模板、邮件日志
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.exceptions import BadRequestException, NotFoundException
from careers.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    MessageResponse,
    DictResponse,
)
from careers.core.security import require_roles, revoke_user_sessions
from careers.core.validators import (
    RESET_PASSWORD_MIN_LENGTH,
    require_fields,
    validate_email,
    validate_password,
)
from careers.crud import (
    application_crud,
    email_log_crud,
    email_template_crud,
    hr_request_crud,
    interview_crud,
    job_crud,
    system_setting_crud,
    user_crud,
)
from careers.models import (
    ApplicationStatus,
    EmailStatus,
    EmailType,
    InterviewStatus,
    User,
    UserRole,
)
from careers.schemas.admin import (
    AdminCreate,
    AdminUpdate,
    ApplicantOverview,
    CreateHRRequest,
    EmailLogResponse,
    EmailTemplateResponse,
    EmailTemplateUpsert,
    HRPerformance,
    HRUserUpdate,
    PasswordReset,
    SystemSettingResponse,
    SystemSettingUpsert,
)
from careers.schemas.application import ApplicationResponse
from careers.schemas.interview import InterviewResponse
from careers.schemas.job import JobResponse
from careers.schemas.user import UserResponse
from careers.services import all_hr_performance, create_hr_account

router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN))])


def user_to_response(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump()


async def _get_user_with_role(db: AsyncSession, user_id: str, role: UserRole, label: str) -> User:
    user = await user_crud.get(db, user_id)
    if not user or user.role != role.value:
        raise NotFoundException(f"{label} not found")
    return user


async def _apply_email_change(db: AsyncSession, user: User, email: Optional[str]) -> Optional[str]:
    """邮箱变更时校验格式与唯一性，返回新邮箱（未变更返回 None）"""
    if not email:
        return None
    email = validate_email(email)
    if email == user.email:
        return None
    if await user_crud.get_by_email(db, email):
        raise BadRequestException("Email already exists")
    return email


# ========== HR 用户 ==========

@router.get("/hr-users", summary="获取 HR 用户列表", response_model=ResponseModel[List[UserResponse]])
async def get_hr_users(db: AsyncSession = Depends(get_db)):
    users = await user_crud.get_multi_by_role(db, UserRole.HR, limit=1000)
    return success_response(data=[user_to_response(u) for u in users])


@router.post(
    "/create-hr",
    summary="直接创建 HR 账号",
    status_code=201,
    response_model=ResponseModel[UserResponse],
)
async def create_hr_user(
    data: CreateHRRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    管理员直接创建 HR 账号

    部门存在时同时创建占位岗位建立关联
    """
    require_fields(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password=data.password,
        department=data.department,
    )
    email = validate_email(data.email)
    password = validate_password(data.password)
    if await user_crud.get_by_email(db, email):
        raise BadRequestException("User with this email already exists")

    user = await create_hr_account(
        db,
        email=email,
        password=password,
        first_name=data.first_name,
        last_name=data.last_name,
        department=data.department,
    )
    return success_response(
        data=user_to_response(user),
        message="HR user created successfully",
        code=201
    )


@router.get("/hr-users/{user_id}", summary="获取 HR 用户详情", response_model=ResponseModel[UserResponse])
async def get_hr_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await _get_user_with_role(db, user_id, UserRole.HR, "HR user")
    return success_response(data=user_to_response(user))


@router.put("/hr-users/{user_id}", summary="更新 HR 用户", response_model=ResponseModel[UserResponse])
async def update_hr_user(
    user_id: str,
    data: HRUserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user_with_role(db, user_id, UserRole.HR, "HR user")

    update_data = data.model_dump(exclude_unset=True)
    new_email = await _apply_email_change(db, user, update_data.pop("email", None))
    if new_email:
        update_data["email"] = new_email

    user = await user_crud.update(db, db_obj=user, obj_in=update_data)
    if data.is_active is False:
        await revoke_user_sessions(db, user.id)
    return success_response(data=user_to_response(user), message="HR user updated successfully")


@router.delete("/hr-users/{user_id}", summary="删除 HR 用户", response_model=MessageResponse)
async def delete_hr_user(user_id: str, db: AsyncSession = Depends(get_db)):
    """删除 HR 用户及其账号申请记录"""
    user = await _get_user_with_role(db, user_id, UserRole.HR, "HR user")
    await hr_request_crud.delete_by_email(db, user.email)
    await user_crud.delete(db, id=user.id)
    logger.info(f"HR user deleted: {user.email}")
    return success_response(message="HR user deleted successfully")


@router.put("/hr-users/{user_id}/password", summary="重置 HR 密码", response_model=MessageResponse)
async def reset_hr_password(
    user_id: str,
    data: PasswordReset,
    db: AsyncSession = Depends(get_db),
):
    password = validate_password(data.password, min_length=RESET_PASSWORD_MIN_LENGTH)
    user = await _get_user_with_role(db, user_id, UserRole.HR, "HR user")
    await user_crud.set_password(db, user=user, password=password)
    await revoke_user_sessions(db, user.id)
    return success_response(message="Password updated successfully")


# ========== 管理员 ==========

@router.get("/admins", summary="获取管理员列表", response_model=ResponseModel[List[UserResponse]])
async def get_admins(db: AsyncSession = Depends(get_db)):
    admins = await user_crud.get_multi_by_role(db, UserRole.ADMIN, limit=1000)
    return success_response(data=[user_to_response(u) for u in admins])


@router.post(
    "/admins",
    summary="创建管理员",
    status_code=201,
    response_model=ResponseModel[UserResponse],
)
async def create_admin(
    data: AdminCreate,
    db: AsyncSession = Depends(get_db),
):
    require_fields(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        password=data.password,
    )
    email = validate_email(data.email)
    password = validate_password(data.password)
    if await user_crud.get_by_email(db, email):
        raise BadRequestException("User with this email already exists")

    admin = await user_crud.create_user(
        db,
        email=email,
        password=password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.ADMIN,
    )
    logger.info(f"Admin created: {admin.email}")
    return success_response(
        data=user_to_response(admin),
        message="Admin created successfully",
        code=201
    )


@router.get("/admins/{user_id}", summary="获取管理员详情", response_model=ResponseModel[UserResponse])
async def get_admin(user_id: str, db: AsyncSession = Depends(get_db)):
    admin = await _get_user_with_role(db, user_id, UserRole.ADMIN, "Admin")
    return success_response(data=user_to_response(admin))


@router.put("/admins/{user_id}", summary="更新管理员", response_model=ResponseModel[UserResponse])
async def update_admin(
    user_id: str,
    data: AdminUpdate,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """更新管理员，password 为空时不修改密码"""
    require_fields(first_name=data.first_name, last_name=data.last_name, email=data.email)
    admin = await _get_user_with_role(db, user_id, UserRole.ADMIN, "Admin")

    update_data = {"first_name": data.first_name, "last_name": data.last_name}
    new_email = await _apply_email_change(db, admin, data.email)
    if new_email:
        update_data["email"] = new_email
    if data.is_active is not None and admin.id != current_user.id:
        update_data["is_active"] = data.is_active

    admin = await user_crud.update(db, db_obj=admin, obj_in=update_data)
    if data.password:
        await user_crud.set_password(db, user=admin, password=validate_password(data.password))
    return success_response(data=user_to_response(admin), message="Admin updated successfully")


@router.delete("/admins/{user_id}", summary="删除管理员", response_model=MessageResponse)
async def delete_admin(
    user_id: str,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    if user_id == current_user.id:
        raise BadRequestException("Cannot delete your own account")
    admin = await _get_user_with_role(db, user_id, UserRole.ADMIN, "Admin")
    await user_crud.delete(db, id=admin.id)
    logger.info(f"Admin deleted: {admin.email} by {current_user.email}")
    return success_response(message="Admin deleted successfully")


# ========== HR 绩效 ==========

@router.get("/hr-performance", summary="HR 绩效统计", response_model=ResponseModel[List[HRPerformance]])
async def get_hr_performance(db: AsyncSession = Depends(get_db)):
    metrics = await all_hr_performance(db)
    return success_response(data=[HRPerformance(**m).model_dump() for m in metrics])


# ========== 全局总览 ==========

@router.get(
    "/oversight/applications",
    summary="全部申请",
    response_model=PagedResponseModel[ApplicationResponse],
)
async def oversee_applications(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    status: Optional[ApplicationStatus] = Query(None, description="状态筛选"),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    status_value = status.value if status else None
    items = await application_crud.get_multi_for_user(
        db, current_user, skip=(page - 1) * page_size, limit=page_size, status=status_value
    )
    total = await application_crud.count_for_user(db, current_user, status=status_value)
    return paged_response(
        [ApplicationResponse.model_validate(a).model_dump() for a in items], total, page, page_size
    )


@router.get(
    "/oversight/applicants",
    summary="全部求职者及其申请",
    response_model=PagedResponseModel[ApplicantOverview],
)
async def oversee_applicants(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    db: AsyncSession = Depends(get_db),
):
    applicants = await user_crud.get_applicants_with_applications(
        db, skip=(page - 1) * page_size, limit=page_size
    )
    total = await user_crud.count_by_role(db, UserRole.APPLICANT)
    return paged_response(
        [ApplicantOverview.model_validate(u).model_dump() for u in applicants], total, page, page_size
    )


@router.get("/oversight/hr-users", summary="全部 HR 及其岗位数", response_model=DictResponse)
async def oversee_hr_users(db: AsyncSession = Depends(get_db)):
    hr_users = await user_crud.get_multi_by_role(db, UserRole.HR, limit=1000)
    items = []
    for user in hr_users:
        item = user_to_response(user)
        item["jobs_posted"] = await job_crud.count_by_creator(db, user.id)
        items.append(item)
    return success_response(data={"hr_users": items, "total": len(items)})


@router.get(
    "/oversight/interviews",
    summary="全部面试",
    response_model=PagedResponseModel[InterviewResponse],
)
async def oversee_interviews(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    status: Optional[InterviewStatus] = Query(None, description="面试状态"),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    status_value = status.value if status else None
    items = await interview_crud.get_multi_for_user(
        db, current_user, skip=(page - 1) * page_size, limit=page_size, status=status_value
    )
    total = await interview_crud.count_for_user(db, current_user, status=status_value)
    return paged_response(
        [InterviewResponse.model_validate(i).model_dump() for i in items], total, page, page_size
    )


@router.get("/oversight/jobs", summary="全部岗位", response_model=PagedResponseModel[JobResponse])
async def oversee_jobs(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    jobs = await job_crud.get_visible(db, current_user, skip=(page - 1) * page_size, limit=page_size)
    total = await job_crud.count_visible(db, current_user)
    counts = await job_crud.get_application_counts(db, [j.id for j in jobs])

    items = []
    for job in jobs:
        item = JobResponse.model_validate(job)
        item.application_count = counts.get(job.id, 0)
        items.append(item.model_dump())
    return paged_response(items, total, page, page_size)


@router.get("/oversight/jobs/{job_id}", summary="岗位详情及其申请", response_model=DictResponse)
async def oversee_job(job_id: str, db: AsyncSession = Depends(get_db)):
    job = await job_crud.get(db, job_id)
    if not job:
        raise NotFoundException("Job not found")

    applications = await application_crud.get_multi_by_job(db, job_id)
    item = JobResponse.model_validate(job)
    item.application_count = len(applications)
    return success_response(data={
        "job": item.model_dump(),
        "applications": [ApplicationResponse.model_validate(a).model_dump() for a in applications],
    })


# ========== 系统设置 ==========

@router.get("/settings", summary="获取系统设置", response_model=ResponseModel[List[SystemSettingResponse]])
async def get_settings_list(db: AsyncSession = Depends(get_db)):
    items = await system_setting_crud.get_multi(db, limit=1000, order_by=system_setting_crud.model.key)
    return success_response(data=[SystemSettingResponse.model_validate(s).model_dump() for s in items])


@router.put("/settings/{key}", summary="更新系统设置", response_model=ResponseModel[SystemSettingResponse])
async def upsert_setting(
    key: str,
    data: SystemSettingUpsert,
    db: AsyncSession = Depends(get_db),
):
    setting = await system_setting_crud.upsert(db, key=key, value=data.value, description=data.description)
    return success_response(
        data=SystemSettingResponse.model_validate(setting).model_dump(),
        message="Setting saved"
    )


# ========== 邮件模板与日志 ==========

@router.get(
    "/email-templates",
    summary="获取邮件模板",
    response_model=ResponseModel[List[EmailTemplateResponse]],
)
async def get_email_templates(db: AsyncSession = Depends(get_db)):
    items = await email_template_crud.get_multi(db, limit=100, order_by=email_template_crud.model.email_type)
    return success_response(data=[EmailTemplateResponse.model_validate(t).model_dump() for t in items])


@router.put(
    "/email-templates/{email_type}",
    summary="保存邮件模板",
    response_model=ResponseModel[EmailTemplateResponse],
)
async def upsert_email_template(
    email_type: EmailType,
    data: EmailTemplateUpsert,
    db: AsyncSession = Depends(get_db),
):
    """保存某类邮件的自定义模板，启用后覆盖内置模板"""
    template = await email_template_crud.get_by_type(db, email_type.value)
    if template is None:
        template = await email_template_crud.create(db, obj_in={
            "email_type": email_type.value,
            **data.model_dump(),
        })
    else:
        template = await email_template_crud.update(db, db_obj=template, obj_in=data)
    return success_response(
        data=EmailTemplateResponse.model_validate(template).model_dump(),
        message="Email template saved"
    )


@router.get("/email-logs", summary="获取邮件日志", response_model=PagedResponseModel[EmailLogResponse])
async def get_email_logs(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    email_type: Optional[EmailType] = Query(None, description="邮件类型"),
    status: Optional[EmailStatus] = Query(None, description="发送状态"),
    application_id: Optional[str] = Query(None, description="申请ID"),
    db: AsyncSession = Depends(get_db),
):
    filters = {
        "email_type": email_type.value if email_type else None,
        "status": status.value if status else None,
        "application_id": application_id,
    }
    items = await email_log_crud.get_filtered(
        db, skip=(page - 1) * page_size, limit=page_size, **filters
    )
    total = await email_log_crud.count_filtered(db, **filters)
    return paged_response(
        [EmailLogResponse.model_validate(log).model_dump() for log in items], total, page, page_size
    )
