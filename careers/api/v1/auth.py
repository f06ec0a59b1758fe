"""
认证 API 路由
"""
from fastapi import APIRouter, Depends, Query, Request, Response
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.config import settings
from careers.core.database import get_db
from careers.core.exceptions import UnauthorizedException, BadRequestException
from careers.core.response import success_response, ResponseModel, MessageResponse, DictResponse
from careers.core.security import (
    extract_token,
    get_current_user,
    issue_session_token,
    revoke_session_token,
)
from careers.core.validators import require_fields, validate_email, validate_password
from careers.crud import user_crud
from careers.models import User, UserRole
from careers.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse

router = APIRouter()


@router.post(
    "/register",
    summary="求职者注册",
    status_code=201,
    response_model=ResponseModel[UserResponse],
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    注册求职者账号

    - 邮箱格式校验
    - 密码至少 8 位
    - 邮箱重复返回 400
    """
    require_fields(first_name=data.first_name, last_name=data.last_name, email=data.email, password=data.password)
    email = validate_email(data.email)
    password = validate_password(data.password)

    if await user_crud.get_by_email(db, email):
        raise BadRequestException("User with this email already exists")

    user = await user_crud.create_user(
        db,
        email=email,
        password=password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.APPLICANT,
        phone_number=data.phone_number,
        country_code=data.country_code,
    )
    logger.info(f"Applicant registered: {user.email}")
    return success_response(
        data=UserResponse.model_validate(user).model_dump(),
        message="User created successfully",
        code=201
    )


@router.get("/check-email", summary="检查邮箱是否已注册", response_model=DictResponse)
async def check_email(
    email: str = Query("", description="邮箱"),
    db: AsyncSession = Depends(get_db),
):
    if not email.strip():
        raise BadRequestException("Email parameter is required")
    user = await user_crud.get_by_email(db, email)
    return success_response(data={"exists": user is not None})


@router.post("/login", summary="登录", response_model=ResponseModel[LoginResponse])
async def login(
    data: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """
    邮箱密码登录

    返回会话令牌，同时写入 HttpOnly Cookie
    """
    user = await user_crud.authenticate(db, data.email, data.password)
    if user is None:
        raise UnauthorizedException("Invalid email or password")

    session = await issue_session_token(db, user)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session["token"],
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return success_response(
        data=LoginResponse(
            token=session["token"],
            expires_at=session["expires_at"],
            user=UserResponse.model_validate(user),
        ).model_dump(),
        message="Login successful"
    )


@router.post("/logout", summary="退出登录", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    token = extract_token(request)
    if token:
        await revoke_session_token(db, token)
    response.delete_cookie(settings.session_cookie_name)
    return success_response(message="Logged out")


@router.get("/me", summary="当前用户", response_model=ResponseModel[UserResponse])
async def me(current_user: User = Depends(get_current_user)):
    return success_response(data=UserResponse.model_validate(current_user).model_dump())
