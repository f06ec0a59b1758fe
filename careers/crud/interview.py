"""
面试与面试评估 CRUD 操作
"""
from typing import Optional, List
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from careers.models import (
    Application, Interview, InterviewReview, InterviewStatus, Job, User, UserRole
)
from .base import CRUDBase


class CRUDInterview(CRUDBase[Interview]):
    """面试 CRUD 操作类"""

    def _scope_query(self, query, user: User, *, status: Optional[str] = None):
        """
        按角色限定面试范围

        - ADMIN: 全部
        - HR: 自己岗位下的面试或自己安排的面试
        - APPLICANT: 自己作为候选人的面试
        """
        if user.role == UserRole.HR.value:
            query = (
                query.join(Application, Application.id == self.model.application_id)
                .join(Job, Job.id == Application.job_id)
                .where(or_(Job.created_by_id == user.id, self.model.scheduled_by_id == user.id))
            )
        elif user.role != UserRole.ADMIN.value:
            query = query.where(self.model.candidate_id == user.id)

        if status:
            query = query.where(self.model.status == status)
        return query

    async def get_detail(self, db: AsyncSession, id: str) -> Optional[Interview]:
        """获取面试详情（刷新评估列表）"""
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
    ) -> List[Interview]:
        """按角色获取面试列表（面试时间倒序）"""
        query = self._scope_query(select(self.model), user, status=status)
        result = await db.execute(
            query.order_by(self.model.scheduled_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_user(self, db: AsyncSession, user: User, *, status: Optional[str] = None) -> int:
        query = self._scope_query(select(func.count()).select_from(self.model), user, status=status)
        result = await db.execute(query)
        return result.scalar() or 0

    async def get_active_for_application(self, db: AsyncSession, application_id: str) -> Optional[Interview]:
        """申请当前有效（已安排）的面试"""
        result = await db.execute(
            select(self.model)
            .where(
                self.model.application_id == application_id,
                self.model.status == InterviewStatus.SCHEDULED.value,
            )
            .order_by(self.model.scheduled_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_scheduled_by(self, db: AsyncSession, user_id: str) -> int:
        """统计某 HR 安排的面试数"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.scheduled_by_id == user_id)
        )
        return result.scalar() or 0


class CRUDInterviewReview(CRUDBase[InterviewReview]):
    """面试评估 CRUD 操作类"""

    async def get_by_interview_and_reviewer(
        self,
        db: AsyncSession,
        *,
        interview_id: str,
        reviewer_id: str
    ) -> Optional[InterviewReview]:
        """某评估人对某场面试的评估"""
        result = await db.execute(
            select(self.model).where(
                self.model.interview_id == interview_id,
                self.model.hr_reviewer_id == reviewer_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_stats_for_reviewer(self, db: AsyncSession, reviewer_id: str) -> tuple[int, Optional[float]]:
        """评估人的评估数量与平均综合评分"""
        result = await db.execute(
            select(func.count(self.model.id), func.avg(self.model.overall_rating))
            .where(self.model.hr_reviewer_id == reviewer_id)
        )
        count, average = result.one()
        return count or 0, float(average) if average is not None else None


interview_crud = CRUDInterview(Interview)
interview_review_crud = CRUDInterviewReview(InterviewReview)
