"""
认证与权限模块

- 密码哈希：werkzeug scrypt
- 会话令牌：随机令牌，库中只保存 sha256 摘要
- 权限依赖：get_current_user / require_roles 供路由注入
"""
import hashlib
import secrets
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import check_password_hash, generate_password_hash

from .config import settings
from .database import get_db
from .exceptions import ForbiddenException, UnauthorizedException
from careers.models import Application, Job, User, UserRole, UserSession, utc_now


TOKEN_PREFIX = "ST-"


# ========== 密码 ==========

def hash_password(password: str) -> str:
    """生成密码哈希"""
    return generate_password_hash(password, method="scrypt", salt_length=16)


def verify_password(password: str, password_hash: str) -> bool:
    """校验密码，哈希格式异常时视为不匹配"""
    try:
        return check_password_hash(str(password_hash or ""), str(password or ""))
    except ValueError:
        return False


# ========== 会话令牌 ==========

def _sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


async def issue_session_token(db: AsyncSession, user: User) -> dict:
    """为用户签发新会话，返回令牌明文与过期时间"""
    token = TOKEN_PREFIX + secrets.token_hex(32)
    expires_at = utc_now() + timedelta(minutes=settings.session_ttl_minutes)

    db.add(UserSession(
        token_hash=_sha256_hex(token),
        token_prefix=token[:12],
        user_id=user.id,
        role=user.role,
        expires_at=expires_at,
        last_seen_at=utc_now(),
    ))
    await db.flush()

    logger.info(f"Session issued: user={user.email} prefix={token[:12]}")
    return {"token": token, "expires_at": expires_at}


async def validate_session_token(db: AsyncSession, token: Optional[str]) -> Optional[User]:
    """
    校验令牌

    令牌不存在、已过期、已注销或用户被停用时返回 None
    """
    if not token:
        return None

    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == _sha256_hex(token))
    )
    session = result.scalar_one_or_none()
    if session is None or session.revoked_at is not None:
        return None

    now = utc_now()
    if session.expires_at < now:
        return None

    user = session.user
    if user is None or not user.is_active:
        return None

    session.last_seen_at = now
    return user


async def revoke_session_token(db: AsyncSession, token: str) -> bool:
    """注销单个会话"""
    result = await db.execute(
        update(UserSession)
        .where(UserSession.token_hash == _sha256_hex(token), UserSession.revoked_at.is_(None))
        .values(revoked_at=utc_now())
    )
    return result.rowcount > 0


async def revoke_user_sessions(db: AsyncSession, user_id: str) -> int:
    """注销用户的全部会话（重置密码、停用账号时调用）"""
    result = await db.execute(
        update(UserSession)
        .where(UserSession.user_id == user_id, UserSession.revoked_at.is_(None))
        .values(revoked_at=utc_now())
    )
    return result.rowcount


def extract_token(request: Request) -> Optional[str]:
    """从 Authorization: Bearer 头或会话 Cookie 中读取令牌"""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.session_cookie_name)


# ========== 依赖注入 ==========

async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """获取当前用户，未登录返回 None"""
    return await validate_session_token(db, extract_token(request))


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user)
) -> User:
    """获取当前用户，未登录抛出 401"""
    if user is None:
        raise UnauthorizedException("Unauthorized")
    return user


def require_roles(*roles: UserRole):
    """
    角色校验依赖工厂

    使用方式:
        @router.post("", dependencies=[Depends(require_roles(UserRole.HR, UserRole.ADMIN))])
        或
        current_user: User = Depends(require_roles(UserRole.ADMIN))
    """
    allowed = {role.value for role in roles}

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise ForbiddenException(
                f"This action requires one of the roles: {', '.join(sorted(allowed))}"
            )
        return user

    return dependency


# ========== 资源级权限 ==========

def can_manage_job(user: User, job: Job) -> bool:
    """管理员可管理全部岗位，HR 仅能管理自己创建的岗位"""
    if user.role == UserRole.ADMIN.value:
        return True
    return user.role == UserRole.HR.value and job.created_by_id == user.id


def can_access_application(user: User, application: Application) -> bool:
    """
    申请可见性

    - ADMIN: 全部
    - HR: 自己岗位下的申请
    - APPLICANT: 自己的申请
    """
    if user.role == UserRole.ADMIN.value:
        return True
    if user.role == UserRole.HR.value:
        return application.job is not None and application.job.created_by_id == user.id
    return application.applicant_id == user.id
