"""
数据库模型模块
"""
from .base import BaseModel, TimestampMixin, utc_now
from .user import User, UserRole, UserSession
from .department import Department
from .job import Job, JobDescription
from .application import Application, ApplicationHistory, ApplicationStatus, EmploymentType
from .interview import Interview, InterviewReview, InterviewStatus, InterviewType, Recommendation
from .hr_request import HRRequest, HRRequestStatus
from .notification import Notification
from .email import EmailLog, EmailTemplate, EmailType, EmailStatus
from .setting import SystemSetting

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "utc_now",
    "User",
    "UserRole",
    "UserSession",
    "Department",
    "Job",
    "JobDescription",
    "Application",
    "ApplicationHistory",
    "ApplicationStatus",
    "EmploymentType",
    "Interview",
    "InterviewReview",
    "InterviewStatus",
    "InterviewType",
    "Recommendation",
    "HRRequest",
    "HRRequestStatus",
    "Notification",
    "EmailLog",
    "EmailTemplate",
    "EmailType",
    "EmailStatus",
    "SystemSetting",
]
