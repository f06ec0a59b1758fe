"""
HR 账号申请 API 路由

HR 提交开通申请，管理员审批
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
    MessageResponse,
)
from careers.core.security import get_current_user, require_roles
from careers.core.validators import validate_email, validate_password
from careers.crud import hr_request_crud, user_crud
from careers.models import HRRequestStatus, User, UserRole, utc_now
from careers.schemas.hr_request import (
    HRRequestAction,
    HRRequestCreate,
    HRRequestProcess,
    HRRequestResponse,
)
from careers.services import create_hr_account

router = APIRouter()


def hr_request_to_response(hr_request) -> dict:
    return HRRequestResponse.model_validate(hr_request).model_dump()


@router.get("", summary="获取 HR 账号申请列表", response_model=PagedResponseModel[HRRequestResponse])
async def get_hr_requests(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    status: Optional[HRRequestStatus] = Query(None, description="处理状态"),
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """管理员看全部申请，HR 只看自己提交的"""
    status_value = status.value if status else None
    items = await hr_request_crud.get_multi_for_user(
        db, current_user, skip=(page - 1) * page_size, limit=page_size, status=status_value
    )
    total = await hr_request_crud.count_for_user(db, current_user, status=status_value)
    return paged_response([hr_request_to_response(r) for r in items], total, page, page_size)


@router.post(
    "",
    summary="提交 HR 账号申请",
    status_code=201,
    response_model=ResponseModel[HRRequestResponse],
)
async def create_hr_request(
    data: HRRequestCreate,
    current_user: User = Depends(require_roles(UserRole.HR)),
    db: AsyncSession = Depends(get_db),
):
    """
    HR 为新同事提交账号申请

    邮箱不能与已有用户或已有申请重复
    """
    email = validate_email(data.email)

    if await user_crud.get_by_email(db, email):
        raise ConflictException("User with this email already exists")
    if await hr_request_crud.get_by_email(db, email):
        raise ConflictException("HR request for this email already exists")

    hr_request = await hr_request_crud.create(db, obj_in={
        "first_name": data.first_name,
        "last_name": data.last_name,
        "email": email,
        "phone_number": data.phone_number,
        "department": data.department,
        "reason": data.reason,
        "status": HRRequestStatus.PENDING.value,
        "requested_by": current_user.id,
        "requested_by_name": current_user.full_name,
    })
    logger.info(f"HR request submitted for {email} by {current_user.email}")
    return success_response(
        data=hr_request_to_response(hr_request),
        message="HR request submitted successfully",
        code=201
    )


@router.get("/{request_id}", summary="获取 HR 账号申请详情", response_model=ResponseModel[HRRequestResponse])
async def get_hr_request(
    request_id: str,
    current_user: User = Depends(require_roles(UserRole.HR, UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    hr_request = await hr_request_crud.get(db, request_id)
    if not hr_request:
        raise NotFoundException("HR request not found")
    if current_user.role != UserRole.ADMIN.value and hr_request.requested_by != current_user.id:
        raise ForbiddenException("Access denied")
    return success_response(data=hr_request_to_response(hr_request))


@router.put("/{request_id}", summary="审批 HR 账号申请", response_model=ResponseModel[HRRequestResponse])
async def process_hr_request(
    request_id: str,
    data: HRRequestProcess,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """
    审批 HR 账号申请

    - APPROVE: 需提供初始密码，创建 HR 用户并关联部门
    - REJECT: 记录拒绝原因
    只能处理 PENDING 状态的申请
    """
    hr_request = await hr_request_crud.get(db, request_id)
    if not hr_request:
        raise NotFoundException("HR request not found")
    if hr_request.status != HRRequestStatus.PENDING.value:
        raise BadRequestException("Request already processed")

    if data.action == HRRequestAction.APPROVE:
        if not data.password:
            raise BadRequestException("Password required for approval")
        password = validate_password(data.password)
        if await user_crud.get_by_email(db, hr_request.email):
            raise BadRequestException("User with this email already exists")

        await create_hr_account(
            db,
            email=hr_request.email,
            password=password,
            first_name=hr_request.first_name,
            last_name=hr_request.last_name,
            department=hr_request.department,
            phone_number=hr_request.phone_number,
        )
        update_data = {
            "status": HRRequestStatus.APPROVED.value,
            "approved_by": current_user.id,
            "approved_by_name": current_user.full_name,
            "approved_at": utc_now(),
        }
        message = "HR request approved and user created"
    else:
        update_data = {
            "status": HRRequestStatus.REJECTED.value,
            "rejection_reason": data.rejection_reason or "No reason provided",
        }
        message = "HR request rejected"

    hr_request = await hr_request_crud.update(db, db_obj=hr_request, obj_in=update_data)
    logger.info(f"HR request {request_id} {hr_request.status} by {current_user.email}")
    return success_response(data=hr_request_to_response(hr_request), message=message)


@router.delete("/{request_id}", summary="删除 HR 账号申请", response_model=MessageResponse)
async def delete_hr_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """提交人或管理员可删除，仅限未处理的申请"""
    hr_request = await hr_request_crud.get(db, request_id)
    if not hr_request:
        raise NotFoundException("HR request not found")
    if current_user.role != UserRole.ADMIN.value and hr_request.requested_by != current_user.id:
        raise ForbiddenException("Access denied")
    if hr_request.status != HRRequestStatus.PENDING.value:
        raise BadRequestException("Cannot delete processed request")

    await hr_request_crud.delete(db, id=request_id)
    return success_response(message="HR request deleted successfully")
