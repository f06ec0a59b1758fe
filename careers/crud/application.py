"""
求职申请 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import (
    Application, ApplicationHistory, ApplicationStatus, Job, User, UserRole
)
from .base import CRUDBase


class CRUDApplication(CRUDBase[Application]):
    """求职申请 CRUD 操作类"""

    def _scope_query(self, query, user: User, *, status: Optional[str] = None):
        """
        按角色限定申请范围

        - ADMIN: 全部
        - HR: 自己创建的岗位下的申请
        - APPLICANT: 自己的申请
        """
        if user.role == UserRole.HR.value:
            query = query.join(Job, Job.id == self.model.job_id).where(Job.created_by_id == user.id)
        elif user.role != UserRole.ADMIN.value:
            query = query.where(self.model.applicant_id == user.id)

        if status:
            query = query.where(self.model.status == status)
        return query

    async def get_detail(self, db: AsyncSession, id: str) -> Optional[Application]:
        """
        获取申请详情

        populate_existing 保证同一会话内写入后再读取拿到最新的历史记录
        """
        result = await db.execute(
            select(self.model)
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
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
    ) -> List[Application]:
        """按角色获取申请列表（最近更新在前）"""
        query = self._scope_query(select(self.model), user, status=status)
        result = await db.execute(
            query.order_by(self.model.updated_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(
        self,
        db: AsyncSession,
        user: User,
        *,
        status: Optional[str] = None
    ) -> int:
        """按角色统计申请数"""
        query = self._scope_query(
            select(func.count()).select_from(self.model), user, status=status
        )
        result = await db.execute(query)
        return result.scalar() or 0

    async def get_open_for_applicant_job(
        self,
        db: AsyncSession,
        *,
        applicant_id: str,
        job_id: str
    ) -> Optional[Application]:
        """求职者在该岗位下仍在流程中的申请（已拒绝的不算）"""
        result = await db.execute(
            select(self.model)
            .where(
                self.model.applicant_id == applicant_id,
                self.model.job_id == job_id,
                self.model.status != ApplicationStatus.REJECTED.value,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_applicant(self, db: AsyncSession, applicant_id: str) -> List[Application]:
        """获取某求职者的全部申请"""
        result = await db.execute(
            select(self.model)
            .where(self.model.applicant_id == applicant_id)
            .order_by(self.model.submitted_at.desc())
        )
        return list(result.scalars().all())

    async def get_multi_by_job(self, db: AsyncSession, job_id: str) -> List[Application]:
        """某岗位下的全部申请（最新提交在前）"""
        result = await db.execute(
            select(self.model)
            .where(self.model.job_id == job_id)
            .order_by(self.model.submitted_at.desc())
        )
        return list(result.scalars().all())

    async def applicant_owns_file(self, db: AsyncSession, applicant_id: str, file_id: str) -> bool:
        """文件是否被该求职者的某个申请引用"""
        applications = await self.get_by_applicant(db, applicant_id)
        return any(file_id in application.file_ids for application in applications)

    async def get_reviewed_for_job_owner(self, db: AsyncSession, user_id: str) -> List[Application]:
        """
        某 HR 岗位下已处理过的申请

        状态不再是 PENDING 且提交后有过更新
        """
        result = await db.execute(
            select(self.model)
            .join(Job, Job.id == self.model.job_id)
            .where(
                Job.created_by_id == user_id,
                self.model.status != ApplicationStatus.PENDING.value,
                self.model.updated_at > self.model.submitted_at,
            )
        )
        return list(result.scalars().all())


class CRUDApplicationHistory(CRUDBase[ApplicationHistory]):
    """状态历史 CRUD 操作类"""

    async def get_by_application(self, db: AsyncSession, application_id: str) -> List[ApplicationHistory]:
        """获取申请的状态历史（最新在前）"""
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())


application_crud = CRUDApplication(Application)
application_history_crud = CRUDApplicationHistory(ApplicationHistory)
