"""
个人资料 API 路由
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.response import success_response, ResponseModel
from careers.core.security import get_current_user
from careers.core.validators import validate_linkedin_url
from careers.crud import user_crud
from careers.models import User
from careers.schemas.user import ProfileUpdate, UserResponse

router = APIRouter()


@router.get("/me/profile", summary="获取个人资料", response_model=ResponseModel[UserResponse])
async def get_profile(current_user: User = Depends(get_current_user)):
    return success_response(data=UserResponse.model_validate(current_user).model_dump())


@router.patch("/me/profile", summary="更新个人资料", response_model=ResponseModel[UserResponse])
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    更新个人资料

    LinkedIn 主页必须是 linkedin.com 链接
    """
    validate_linkedin_url(data.linkedin_profile)
    user = await user_crud.update(db, db_obj=current_user, obj_in=data)
    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message="Profile updated successfully"
    )
