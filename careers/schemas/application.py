"""
求职申请相关 Schema
"""
from datetime import datetime
from typing import Optional, List
from pydantic import Field

from careers.models import ApplicationStatus
from .base import BaseSchema, TimestampSchema
from .job import JobBrief
from .user import UserBrief


class ApplicationHistoryResponse(BaseSchema):
    """状态历史记录"""

    id: str
    from_status: Optional[str] = None
    to_status: str
    action: str
    performed_by: Optional[str] = None
    performed_by_name: str
    performed_by_role: str
    notes: Optional[str] = None
    created_at: datetime


class ApplicationResponse(TimestampSchema):
    """申请响应（含状态历史，最新在前）"""

    applicant_id: str
    job_id: str
    job_title: str
    employment_type: Optional[str] = None
    status: str
    resume_url: Optional[str] = None
    additional_files: List[str] = Field(default_factory=list)
    cover_letter: Optional[str] = None
    expected_salary: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    skills: Optional[str] = None
    availability: Optional[str] = None
    references: Optional[str] = None
    submitted_at: datetime
    applicant: Optional[UserBrief] = None
    job: Optional[JobBrief] = None
    history: List[ApplicationHistoryResponse] = Field(default_factory=list)


class StatusUpdateRequest(BaseSchema):
    """状态变更请求（status 与 action 缺失时路由返回 400）"""

    status: Optional[ApplicationStatus] = Field(None, description="目标状态")
    action: Optional[str] = Field(None, description="流转动作，如 START_REVIEW")
    notes: Optional[str] = Field(None, description="备注")


class TransitionResponse(BaseSchema):
    """可执行的状态流转"""

    from_status: str
    to_status: str
    action: str
    allowed_roles: List[str]
    requires_confirmation: bool
    description: str
    confirmation_message: Optional[str] = None
