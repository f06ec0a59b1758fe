"""
HR 账号申请 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import HRRequest, User, UserRole
from .base import CRUDBase
from .user import normalize_email


class CRUDHRRequest(CRUDBase[HRRequest]):
    """HR 账号申请 CRUD 操作类"""

    def _scope_query(self, query, user: User, *, status: Optional[str] = None):
        """管理员看全部，HR 只看自己提交的"""
        if user.role != UserRole.ADMIN.value:
            query = query.where(self.model.requested_by == user.id)
        if status:
            query = query.where(self.model.status == status)
        return query

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[HRRequest]:
        result = await db.execute(
            select(self.model).where(self.model.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_multi_for_user(
        self,
        db: AsyncSession,
        user: User,
        *,
        skip: int = 0,
        limit: int = 100,
        status: Optional[str] = None
    ) -> List[HRRequest]:
        query = self._scope_query(select(self.model), user, status=status)
        result = await db.execute(
            query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(self, db: AsyncSession, user: User, *, status: Optional[str] = None) -> int:
        query = self._scope_query(select(func.count()).select_from(self.model), user, status=status)
        result = await db.execute(query)
        return result.scalar() or 0

    async def delete_by_email(self, db: AsyncSession, email: str) -> int:
        """删除某邮箱的全部申请（删除 HR 用户时调用）"""
        result = await db.execute(
            delete(self.model).where(self.model.email == normalize_email(email))
        )
        return result.rowcount


hr_request_crud = CRUDHRRequest(HRRequest)
