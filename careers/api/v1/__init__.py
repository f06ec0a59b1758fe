"""
API v1 路由模块
"""
from . import (
    auth,
    users,
    departments,
    jobs,
    applications,
    interviews,
    hr_requests,
    notifications,
    files,
    admin,
)

__all__ = [
    "auth",
    "users",
    "departments",
    "jobs",
    "applications",
    "interviews",
    "hr_requests",
    "notifications",
    "files",
    "admin",
]
