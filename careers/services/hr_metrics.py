"""
HR 绩效统计
"""
import math
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from careers.crud import application_crud, interview_crud, interview_review_crud, job_crud, user_crud
from careers.models import User, UserRole


def _review_days(application) -> int:
    """从提交到最近一次处理经过的天数（向上取整）"""
    seconds = (application.updated_at - application.submitted_at).total_seconds()
    return math.ceil(seconds / 86400)


async def hr_performance(db: AsyncSession, hr_user: User) -> dict:
    """
    单个 HR 的绩效指标

    - jobs_posted: 发布的岗位数
    - applicants_reviewed: 其岗位下已处理的申请数
    - average_review_time: 平均处理天数
    - total_interviews: 安排的面试数
    - average_rating: 其评估的平均综合评分
    """
    reviewed = await application_crud.get_reviewed_for_job_owner(db, hr_user.id)
    average_review_time = (
        round(sum(_review_days(a) for a in reviewed) / len(reviewed)) if reviewed else 0
    )
    _, average_rating = await interview_review_crud.get_stats_for_reviewer(db, hr_user.id)

    return {
        "id": hr_user.id,
        "first_name": hr_user.first_name,
        "last_name": hr_user.last_name,
        "email": hr_user.email,
        "is_active": hr_user.is_active,
        "created_at": hr_user.created_at,
        "jobs_posted": await job_crud.count_by_creator(db, hr_user.id),
        "applicants_reviewed": len(reviewed),
        "average_review_time": average_review_time,
        "total_interviews": await interview_crud.count_scheduled_by(db, hr_user.id),
        "average_rating": round(average_rating, 1) if average_rating is not None else 0,
    }


async def all_hr_performance(db: AsyncSession) -> List[dict]:
    hr_users = await user_crud.get_multi_by_role(db, UserRole.HR, limit=1000)
    return [await hr_performance(db, user) for user in hr_users]
