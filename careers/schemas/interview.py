"""
面试与面试评估相关 Schema
"""
from datetime import datetime, timezone
from typing import Optional, List
from pydantic import Field, field_validator

from careers.models import InterviewStatus, InterviewType, Recommendation
from .base import BaseSchema, TimestampSchema
from .user import UserBrief


class InterviewCreate(BaseSchema):
    """安排面试请求"""

    application_id: str = Field(..., description="申请ID")
    scheduled_at: datetime = Field(..., description="面试时间")
    duration_minutes: int = Field(60, ge=15, le=480, description="时长(分钟)")
    interview_type: InterviewType = InterviewType.VIDEO
    location: Optional[str] = Field(None, max_length=255)
    meeting_link: Optional[str] = Field(None, max_length=500)
    interviewer: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    @field_validator("scheduled_at")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """带时区的时间统一转成 UTC 再去掉时区，与库中其他时间一致"""
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class InterviewStatusUpdate(BaseSchema):
    """更新面试状态请求"""

    status: InterviewStatus
    notes: Optional[str] = None


class EvaluationCreate(BaseSchema):
    """
    面试评估请求

    评分范围 1-5 在路由中校验（返回 400）
    """

    technical_skills: int
    communication: int
    cultural_fit: int
    overall_rating: int
    comments: str = Field(..., min_length=1)
    recommendation: Recommendation
    strengths: Optional[str] = None
    areas_for_improvement: Optional[str] = None
    additional_notes: Optional[str] = None


class InterviewReviewResponse(TimestampSchema):
    """面试评估响应"""

    interview_id: str
    hr_reviewer_id: str
    hr_reviewer: Optional[UserBrief] = None
    technical_skills: int
    communication: int
    cultural_fit: int
    overall_rating: int
    comments: Optional[str] = None
    recommendation: str


class InterviewApplicationBrief(BaseSchema):
    id: str
    job_id: str
    job_title: str
    status: str


class InterviewResponse(TimestampSchema):
    """面试响应"""

    application_id: str
    candidate_id: str
    scheduled_by_id: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int
    interview_type: str
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    interviewer: Optional[str] = None
    notes: Optional[str] = None
    status: str
    candidate: Optional[UserBrief] = None
    application: Optional[InterviewApplicationBrief] = None
    reviews: List[InterviewReviewResponse] = Field(default_factory=list)
