"""
邮件日志与邮件模板 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import EmailLog, EmailTemplate
from .base import CRUDBase


class CRUDEmailLog(CRUDBase[EmailLog]):
    """邮件日志 CRUD 操作类"""

    def _filter_query(self, query, *, email_type=None, status=None, application_id=None):
        if email_type:
            query = query.where(self.model.email_type == email_type)
        if status:
            query = query.where(self.model.status == status)
        if application_id:
            query = query.where(self.model.application_id == application_id)
        return query

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
        email_type: Optional[str] = None,
        status: Optional[str] = None,
        application_id: Optional[str] = None
    ) -> List[EmailLog]:
        query = self._filter_query(
            select(self.model),
            email_type=email_type, status=status, application_id=application_id
        )
        result = await db.execute(
            query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_filtered(
        self,
        db: AsyncSession,
        *,
        email_type: Optional[str] = None,
        status: Optional[str] = None,
        application_id: Optional[str] = None
    ) -> int:
        query = self._filter_query(
            select(func.count()).select_from(self.model),
            email_type=email_type, status=status, application_id=application_id
        )
        result = await db.execute(query)
        return result.scalar() or 0


class CRUDEmailTemplate(CRUDBase[EmailTemplate]):
    """邮件模板 CRUD 操作类"""

    async def get_by_type(self, db: AsyncSession, email_type: str) -> Optional[EmailTemplate]:
        result = await db.execute(
            select(self.model).where(self.model.email_type == email_type)
        )
        return result.scalar_one_or_none()

    async def get_active_by_type(self, db: AsyncSession, email_type: str) -> Optional[EmailTemplate]:
        """启用中的模板，没有则返回 None（使用内置模板）"""
        result = await db.execute(
            select(self.model).where(
                self.model.email_type == email_type,
                self.model.is_active == True,
            )
        )
        return result.scalar_one_or_none()


email_log_crud = CRUDEmailLog(EmailLog)
email_template_crud = CRUDEmailTemplate(EmailTemplate)
