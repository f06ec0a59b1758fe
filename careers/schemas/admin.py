"""
管理后台相关 Schema
"""
from datetime import datetime
from typing import Optional, List
from pydantic import Field

from .application import ApplicationResponse
from .base import BaseSchema, TimestampSchema
from .user import UserResponse


class CreateHRRequest(BaseSchema):
    """管理员直接创建 HR 账号"""

    first_name: str
    last_name: str
    email: str
    password: str
    department: str


class HRUserUpdate(BaseSchema):
    """更新 HR 用户"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    linkedin_profile: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class PasswordReset(BaseSchema):
    password: str


class AdminCreate(BaseSchema):
    first_name: str
    last_name: str
    email: str
    password: str


class AdminUpdate(BaseSchema):
    """更新管理员，password 为空时不修改密码"""

    first_name: str
    last_name: str
    email: str
    password: Optional[str] = None
    is_active: Optional[bool] = None


class HRPerformance(BaseSchema):
    """HR 绩效指标"""

    id: str
    first_name: str
    last_name: str
    email: str
    is_active: bool
    created_at: datetime
    jobs_posted: int
    applicants_reviewed: int
    average_review_time: int = Field(..., description="平均处理天数")
    total_interviews: int
    average_rating: float


class ApplicantOverview(UserResponse):
    """求职者及其全部申请"""

    applications: List[ApplicationResponse] = Field(default_factory=list)


class SystemSettingResponse(TimestampSchema):
    key: str
    value: str
    description: Optional[str] = None


class SystemSettingUpsert(BaseSchema):
    value: str
    description: Optional[str] = None


class EmailTemplateResponse(TimestampSchema):
    email_type: str
    subject: str
    body: str
    is_active: bool


class EmailTemplateUpsert(BaseSchema):
    """subject/body 可使用 {applicant_name} {job_title} {company_name} 等占位符"""

    subject: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    is_active: bool = True


class EmailLogResponse(TimestampSchema):
    application_id: Optional[str] = None
    email_type: str
    recipient_email: str
    cc_emails: List[str] = Field(default_factory=list)
    subject: str
    body: str
    status: str
    error_message: Optional[str] = None
