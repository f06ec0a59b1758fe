"""
Pydantic Schemas 模块

定义 API 请求/响应的数据验证模型
"""
from .base import BaseSchema, TimestampSchema
from .user import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    UserBrief,
    UserResponse,
    ProfileUpdate,
)
from .department import (
    DepartmentCreate,
    DepartmentUpdate,
    DepartmentBrief,
    DepartmentResponse,
)
from .job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobBrief,
    JobDescriptionSchema,
)
from .application import (
    ApplicationResponse,
    ApplicationHistoryResponse,
    StatusUpdateRequest,
    TransitionResponse,
)
from .interview import (
    InterviewCreate,
    InterviewStatusUpdate,
    InterviewResponse,
    EvaluationCreate,
    InterviewReviewResponse,
)
from .hr_request import (
    HRRequestCreate,
    HRRequestProcess,
    HRRequestAction,
    HRRequestResponse,
)
from .notification import (
    NotificationResponse,
    NotificationMarkRead,
    NotificationUpdate,
)
from .admin import (
    CreateHRRequest,
    HRUserUpdate,
    PasswordReset,
    AdminCreate,
    AdminUpdate,
    HRPerformance,
    ApplicantOverview,
    SystemSettingResponse,
    SystemSettingUpsert,
    EmailTemplateResponse,
    EmailTemplateUpsert,
    EmailLogResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampSchema",
    # User / Auth
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "UserBrief",
    "UserResponse",
    "ProfileUpdate",
    # Department
    "DepartmentCreate",
    "DepartmentUpdate",
    "DepartmentBrief",
    "DepartmentResponse",
    # Job
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "JobBrief",
    "JobDescriptionSchema",
    # Application
    "ApplicationResponse",
    "ApplicationHistoryResponse",
    "StatusUpdateRequest",
    "TransitionResponse",
    # Interview
    "InterviewCreate",
    "InterviewStatusUpdate",
    "InterviewResponse",
    "EvaluationCreate",
    "InterviewReviewResponse",
    # HR Request
    "HRRequestCreate",
    "HRRequestProcess",
    "HRRequestAction",
    "HRRequestResponse",
    # Notification
    "NotificationResponse",
    "NotificationMarkRead",
    "NotificationUpdate",
    # Admin
    "CreateHRRequest",
    "HRUserUpdate",
    "PasswordReset",
    "AdminCreate",
    "AdminUpdate",
    "HRPerformance",
    "ApplicantOverview",
    "SystemSettingResponse",
    "SystemSettingUpsert",
    "EmailTemplateResponse",
    "EmailTemplateUpsert",
    "EmailLogResponse",
]
