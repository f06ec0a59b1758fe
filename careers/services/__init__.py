"""
服务层模块
"""
from .status_transitions import (
    StatusTransition,
    TRANSITIONS,
    InvalidTransitionError,
    TransitionForbiddenError,
    available_transitions,
    find_transition,
    stage_ordinal,
    validate_transition,
)
from .email_service import EmailService, get_email_service
from .application_status import (
    application_with_history,
    change_application_status,
    list_applications_for,
    transitions_for,
)
from .hr_accounts import create_department_placeholder_job, create_hr_account
from .hr_metrics import all_hr_performance, hr_performance
from .storage import (
    content_type_for,
    has_content,
    is_safe_file_id,
    read_upload,
    remove_uploads,
    resolve_upload_path,
    save_uploads,
)

__all__ = [
    # 状态流转表
    "StatusTransition",
    "TRANSITIONS",
    "InvalidTransitionError",
    "TransitionForbiddenError",
    "available_transitions",
    "find_transition",
    "stage_ordinal",
    "validate_transition",
    # 邮件
    "EmailService",
    "get_email_service",
    # 申请状态
    "application_with_history",
    "change_application_status",
    "list_applications_for",
    "transitions_for",
    # HR 账号
    "create_department_placeholder_job",
    "create_hr_account",
    # HR 绩效
    "all_hr_performance",
    "hr_performance",
    # 文件存储
    "content_type_for",
    "has_content",
    "is_safe_file_id",
    "read_upload",
    "remove_uploads",
    "resolve_upload_path",
    "save_uploads",
]
