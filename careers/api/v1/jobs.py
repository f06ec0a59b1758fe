"""
招聘岗位 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    MessageResponse,
)
from careers.core.exceptions import NotFoundException, ConflictException, ForbiddenException
from careers.core.security import can_manage_job, get_current_user, get_optional_user, require_roles
from careers.crud import department_crud, job_crud
from careers.models import Job, User, UserRole
from careers.schemas.job import JobCreate, JobUpdate, JobResponse

router = APIRouter()


def job_to_response(job: Job, application_count: int = 0) -> dict:
    item = JobResponse.model_validate(job)
    item.application_count = application_count
    return item.model_dump()


def _is_public(job: Job) -> bool:
    return job.is_active and not job.is_draft


async def _get_managed_job(db: AsyncSession, job_id: str, user: User) -> Job:
    job = await job_crud.get(db, job_id)
    if not job:
        raise NotFoundException("Job not found")
    if not can_manage_job(user, job):
        raise ForbiddenException("You can only manage jobs you created")
    return job


@router.get("", summary="获取岗位列表", response_model=PagedResponseModel[JobResponse])
async def get_jobs(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    department_id: Optional[str] = Query(None, description="部门ID"),
    search: Optional[str] = Query(None, description="按岗位名称搜索"),
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    获取岗位列表

    管理员看到全部，HR 看到自己发布的，求职者与未登录用户只看到开放中的非草稿岗位
    """
    skip = (page - 1) * page_size
    jobs = await job_crud.get_visible(
        db, current_user, skip=skip, limit=page_size,
        department_id=department_id, search=search
    )
    total = await job_crud.count_visible(
        db, current_user, department_id=department_id, search=search
    )
    counts = await job_crud.get_application_counts(db, [j.id for j in jobs])

    items = [job_to_response(j, counts.get(j.id, 0)) for j in jobs]
    return paged_response(items, total, page, page_size)


@router.post(
    "",
    summary="创建岗位",
    status_code=201,
    response_model=ResponseModel[JobResponse],
)
async def create_job(
    data: JobCreate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """创建岗位，可同时提交详细描述"""
    if not await department_crud.get(db, data.department_id):
        raise NotFoundException("Department not found")

    job_data = data.model_dump(mode="json")
    # 截止日期保持 datetime 类型
    job_data["application_deadline"] = data.application_deadline
    job = await job_crud.create_with_description(
        db,
        obj_in=job_data,
        created_by_id=current_user.id,
    )

    logger.info(f"Job created: {job.title} by {current_user.email}")
    return success_response(
        data=job_to_response(job),
        message="Job created successfully",
        code=201
    )


@router.get("/{job_id}", summary="获取岗位详情", response_model=ResponseModel[JobResponse])
async def get_job(
    job_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    job = await job_crud.get(db, job_id)
    if not job:
        raise NotFoundException("Job not found")
    if not _is_public(job) and (current_user is None or not can_manage_job(current_user, job)):
        raise NotFoundException("Job not found")

    count = await job_crud.count_applications(db, job_id)
    return success_response(data=job_to_response(job, count))


@router.put("/{job_id}", summary="更新岗位", response_model=ResponseModel[JobResponse])
async def update_job(
    job_id: str,
    data: JobUpdate,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """更新岗位，仅岗位创建者或管理员"""
    job = await _get_managed_job(db, job_id, current_user)

    if data.department_id and not await department_crud.get(db, data.department_id):
        raise NotFoundException("Department not found")

    update_data = data.model_dump(exclude_unset=True, mode="json")
    if "application_deadline" in update_data:
        update_data["application_deadline"] = data.application_deadline

    job = await job_crud.update_with_description(db, db_obj=job, obj_in=update_data)
    count = await job_crud.count_applications(db, job_id)
    return success_response(
        data=job_to_response(job, count),
        message="Job updated successfully"
    )


@router.delete("/{job_id}", summary="删除岗位", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """删除岗位，已有申请时返回 409"""
    job = await _get_managed_job(db, job_id, current_user)

    count = await job_crud.count_applications(db, job.id)
    if count > 0:
        raise ConflictException(
            "Cannot delete job with existing applications. Close the job instead.",
            data={"application_count": count}
        )

    await job_crud.delete(db, id=job_id)
    logger.info(f"Job deleted: {job_id} by {current_user.email}")
    return success_response(message="Job deleted successfully")
