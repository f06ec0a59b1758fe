"""
部门相关 Schema
"""
from typing import Optional
from pydantic import Field

from .base import BaseSchema, TimestampSchema


class DepartmentCreate(BaseSchema):
    """创建部门请求"""

    name: str = Field(..., max_length=100, description="部门名称")
    description: Optional[str] = Field(None, description="部门描述")


class DepartmentUpdate(BaseSchema):
    """更新部门请求"""

    name: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class DepartmentBrief(BaseSchema):
    id: str
    name: str


class DepartmentResponse(TimestampSchema):
    """部门响应"""

    name: str
    description: Optional[str] = None
    is_active: bool
    active_jobs_count: int = Field(0, description="开放中的岗位数")
