"""
部门 CRUD 操作
"""
from typing import Optional, List, Tuple
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import Department, Job
from .base import CRUDBase


class CRUDDepartment(CRUDBase[Department]):
    """部门 CRUD 操作类"""

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Department]:
        """根据名称获取部门"""
        result = await db.execute(
            select(self.model).where(func.lower(self.model.name) == name.strip().lower())
        )
        return result.scalar_one_or_none()

    async def count_active_jobs(self, db: AsyncSession, department_id: str) -> int:
        """统计部门下开放中的岗位数"""
        result = await db.execute(
            select(func.count())
            .select_from(Job)
            .where(Job.department_id == department_id, Job.is_active == True)
        )
        return result.scalar() or 0

    async def get_multi_with_job_counts(
        self,
        db: AsyncSession,
        *,
        include_inactive: bool = True
    ) -> List[Tuple[Department, int]]:
        """获取部门列表及各部门开放岗位数"""
        active_jobs = (
            select(Job.department_id, func.count(Job.id).label("active_jobs"))
            .where(Job.is_active == True)
            .group_by(Job.department_id)
            .subquery()
        )
        query = (
            select(self.model, func.coalesce(active_jobs.c.active_jobs, 0))
            .outerjoin(active_jobs, active_jobs.c.department_id == self.model.id)
            .order_by(self.model.name)
        )
        if not include_inactive:
            query = query.where(self.model.is_active == True)

        result = await db.execute(query)
        return [(department, int(count)) for department, count in result.all()]


department_crud = CRUDDepartment(Department)
