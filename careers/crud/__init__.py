"""
CRUD 操作模块
"""
from .user import user_crud
from .department import department_crud
from .job import job_crud
from .application import application_crud, application_history_crud
from .interview import interview_crud, interview_review_crud
from .hr_request import hr_request_crud
from .notification import notification_crud
from .email import email_log_crud, email_template_crud
from .setting import system_setting_crud

__all__ = [
    "user_crud",
    "department_crud",
    "job_crud",
    "application_crud",
    "application_history_crud",
    "interview_crud",
    "interview_review_crud",
    "hr_request_crud",
    "notification_crud",
    "email_log_crud",
    "email_template_crud",
    "system_setting_crud",
]
