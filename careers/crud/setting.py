"""
系统设置 CRUD 操作
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import SystemSetting
from .base import CRUDBase


class CRUDSystemSetting(CRUDBase[SystemSetting]):
    """系统设置 CRUD 操作类"""

    async def get_by_key(self, db: AsyncSession, key: str) -> Optional[SystemSetting]:
        result = await db.execute(
            select(self.model).where(self.model.key == key)
        )
        return result.scalar_one_or_none()

    async def get_value(self, db: AsyncSession, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = await self.get_by_key(db, key)
        return setting.value if setting is not None else default

    async def upsert(
        self,
        db: AsyncSession,
        *,
        key: str,
        value: str,
        description: Optional[str] = None
    ) -> SystemSetting:
        """存在则更新，不存在则创建"""
        setting = await self.get_by_key(db, key)
        if setting is None:
            return await self.create(db, obj_in={"key": key, "value": value, "description": description})
        return await self.update(db, db_obj=setting, obj_in={"value": value, "description": description})


system_setting_crud = CRUDSystemSetting(SystemSetting)
