"""
用户 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from careers.core.security import hash_password, verify_password
from careers.models import User, UserRole
from .base import CRUDBase


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CRUDUser(CRUDBase[User]):
    """用户 CRUD 操作类"""

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        """根据邮箱获取用户（不区分大小写）"""
        result = await db.execute(
            select(self.model).where(self.model.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def create_user(
        self,
        db: AsyncSession,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.APPLICANT,
        **extra
    ) -> User:
        """创建用户，密码在此处哈希"""
        return await self.create(db, obj_in={
            "email": normalize_email(email),
            "password_hash": hash_password(password),
            "first_name": first_name,
            "last_name": last_name,
            "role": role.value,
            **extra,
        })

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Optional[User]:
        """校验邮箱与密码，失败或账号停用时返回 None"""
        user = await self.get_by_email(db, email)
        if user is None or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def set_password(self, db: AsyncSession, *, user: User, password: str) -> User:
        """重置密码"""
        return await self.update(db, db_obj=user, obj_in={"password_hash": hash_password(password)})

    async def get_multi_by_role(
        self,
        db: AsyncSession,
        role: UserRole,
        *,
        skip: int = 0,
        limit: int = 100
    ) -> List[User]:
        """按角色获取用户列表"""
        result = await db.execute(
            select(self.model)
            .where(self.model.role == role.value)
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_role(self, db: AsyncSession, role: UserRole) -> int:
        """按角色统计用户数"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.role == role.value)
        )
        return result.scalar() or 0

    async def get_active_admin_emails(self, db: AsyncSession) -> List[str]:
        """所有启用中的管理员邮箱（邮件抄送用）"""
        result = await db.execute(
            select(self.model.email)
            .where(self.model.role == UserRole.ADMIN.value, self.model.is_active == True)
            .order_by(self.model.created_at)
        )
        return list(result.scalars().all())

    async def get_applicants_with_applications(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100
    ) -> List[User]:
        """求职者及其全部申请（管理后台总览）"""
        result = await db.execute(
            select(self.model)
            .where(self.model.role == UserRole.APPLICANT.value)
            .options(selectinload(self.model.applications))
            .order_by(self.model.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())


user_crud = CRUDUser(User)
