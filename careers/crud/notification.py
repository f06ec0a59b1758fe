"""
站内通知 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import Notification
from .base import CRUDBase


class CRUDNotification(CRUDBase[Notification]):
    """通知 CRUD 操作类"""

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        """获取用户的通知（最新在前）"""
        query = select(self.model).where(self.model.user_id == user_id)
        if unread_only:
            query = query.where(self.model.is_read == False)
        result = await db.execute(
            query.order_by(self.model.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    async def count_unread(self, db: AsyncSession, user_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.user_id == user_id, self.model.is_read == False)
        )
        return result.scalar() or 0

    async def mark_read(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        notification_ids: Optional[List[str]] = None
    ) -> int:
        """
        标记已读

        notification_ids 为空时标记该用户全部通知
        """
        query = (
            update(self.model)
            .where(self.model.user_id == user_id, self.model.is_read == False)
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        if notification_ids:
            query = query.where(self.model.id.in_(notification_ids))
        result = await db.execute(query)
        return result.rowcount


notification_crud = CRUDNotification(Notification)
