"""
API 路由模块
"""
from fastapi import APIRouter

from .v1 import (
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

# 创建主路由
api_router = APIRouter()

# 注册各模块路由
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["认证"]
)
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["个人资料"]
)
api_router.include_router(
    departments.router,
    prefix="/departments",
    tags=["部门管理"]
)
api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["岗位管理"]
)
api_router.include_router(
    applications.router,
    prefix="/applications",
    tags=["求职申请"]
)
api_router.include_router(
    interviews.router,
    prefix="/interviews",
    tags=["面试管理"]
)
api_router.include_router(
    hr_requests.router,
    prefix="/hr-requests",
    tags=["HR 账号申请"]
)
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["站内通知"]
)
api_router.include_router(
    files.router,
    prefix="/files",
    tags=["文件"]
)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["管理后台"]
)
