"""
招聘岗位 CRUD 操作
"""
from typing import Optional, List, Any, Dict
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import Job, JobDescription, Application, User, UserRole
from .base import CRUDBase


class CRUDJob(CRUDBase[Job]):
    """岗位 CRUD 操作类"""

    def _visible_query(
        self,
        query,
        user: Optional[User],
        *,
        department_id: Optional[str] = None,
        search: Optional[str] = None,
    ):
        """
        岗位可见范围

        - ADMIN: 全部
        - HR: 自己创建的
        - APPLICANT / 未登录: 开放中且非草稿
        """
        if user is not None and user.role == UserRole.ADMIN.value:
            pass
        elif user is not None and user.role == UserRole.HR.value:
            query = query.where(self.model.created_by_id == user.id)
        else:
            query = query.where(self.model.is_active == True, self.model.is_draft == False)

        if department_id:
            query = query.where(self.model.department_id == department_id)
        if search:
            query = query.where(self.model.title.ilike(f"%{search.strip()}%"))
        return query

    async def get_visible(
        self,
        db: AsyncSession,
        user: Optional[User],
        *,
        skip: int = 0,
        limit: int = 100,
        department_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Job]:
        """按角色获取岗位列表"""
        query = self._visible_query(
            select(self.model), user, department_id=department_id, search=search
        )
        result = await db.execute(
            query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_visible(
        self,
        db: AsyncSession,
        user: Optional[User],
        *,
        department_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> int:
        """按角色统计岗位数"""
        query = self._visible_query(
            select(func.count()).select_from(self.model), user,
            department_id=department_id, search=search
        )
        result = await db.execute(query)
        return result.scalar() or 0

    async def create_with_description(
        self,
        db: AsyncSession,
        *,
        obj_in: Dict[str, Any],
        created_by_id: str
    ) -> Job:
        """创建岗位及其详细描述"""
        description_data = obj_in.pop("description", None) or {}
        job = Job(**obj_in, created_by_id=created_by_id)
        job.description = JobDescription(**description_data)
        db.add(job)
        await db.flush()
        await db.refresh(job)
        return job

    async def update_with_description(
        self,
        db: AsyncSession,
        *,
        db_obj: Job,
        obj_in: Dict[str, Any]
    ) -> Job:
        """更新岗位，description 字段整体更新到 JobDescription"""
        description_data = obj_in.pop("description", None)
        if description_data is not None:
            if db_obj.description is None:
                db_obj.description = JobDescription(**description_data)
            else:
                for field, value in description_data.items():
                    setattr(db_obj.description, field, value)

        # 截止日期允许显式清空
        if "application_deadline" in obj_in:
            db_obj.application_deadline = obj_in.pop("application_deadline")

        return await self.update(db, db_obj=db_obj, obj_in=obj_in)

    async def count_applications(self, db: AsyncSession, job_id: str) -> int:
        """统计岗位下的申请数"""
        result = await db.execute(
            select(func.count())
            .select_from(Application)
            .where(Application.job_id == job_id)
        )
        return result.scalar() or 0

    async def count_by_creator(self, db: AsyncSession, user_id: str) -> int:
        """统计某 HR 发布的岗位数（不含草稿）"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.created_by_id == user_id, self.model.is_draft == False)
        )
        return result.scalar() or 0

    async def get_application_counts(
        self,
        db: AsyncSession,
        job_ids: List[str]
    ) -> Dict[str, int]:
        """批量统计各岗位申请数"""
        if not job_ids:
            return {}
        result = await db.execute(
            select(Application.job_id, func.count(Application.id))
            .where(Application.job_id.in_(job_ids))
            .group_by(Application.job_id)
        )
        return {job_id: count for job_id, count in result.all()}


job_crud = CRUDJob(Job)
