"""
招聘岗位相关 Schema
"""
from datetime import datetime
from typing import Optional, List
from pydantic import Field, model_validator

from careers.models import EmploymentType
from .base import BaseSchema, TimestampSchema
from .department import DepartmentBrief
from .user import UserBrief


class JobDescriptionSchema(BaseSchema):
    """岗位详细描述"""

    description: Optional[str] = None
    responsibilities: List[str] = Field(default_factory=list, description="工作职责")
    requirements: List[str] = Field(default_factory=list, description="任职要求")
    benefits: List[str] = Field(default_factory=list, description="福利")
    location: Optional[str] = Field(None, max_length=200)
    remote_work: bool = False


class JobBase(BaseSchema):
    """岗位基础字段"""

    title: str = Field(..., min_length=1, max_length=200, description="岗位名称")
    summary: str = Field(..., min_length=1, description="岗位简介")
    department_id: str = Field(..., description="所属部门ID")
    employment_types: List[EmploymentType] = Field(default_factory=list, description="用工类型")
    required_skills: List[str] = Field(default_factory=list, description="技能要求")
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    application_deadline: Optional[datetime] = None
    is_active: bool = True
    is_draft: bool = False

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_min is not None and self.salary_max is not None and self.salary_min > self.salary_max:
            raise ValueError("salary_min must not exceed salary_max")
        return self


class JobCreate(JobBase):
    """创建岗位请求"""

    description: Optional[JobDescriptionSchema] = None


class JobUpdate(BaseSchema):
    """更新岗位请求"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    summary: Optional[str] = None
    department_id: Optional[str] = None
    employment_types: Optional[List[EmploymentType]] = None
    required_skills: Optional[List[str]] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_draft: Optional[bool] = None
    description: Optional[JobDescriptionSchema] = None


class JobResponse(TimestampSchema):
    """岗位响应"""

    title: str
    summary: Optional[str] = None
    department_id: Optional[str] = None
    department: Optional[DepartmentBrief] = None
    created_by_id: str
    created_by: Optional[UserBrief] = None
    employment_types: List[str]
    required_skills: List[str]
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    application_deadline: Optional[datetime] = None
    is_active: bool
    is_draft: bool
    description: Optional[JobDescriptionSchema] = None
    application_count: int = Field(0, description="申请数量")


class JobBrief(BaseSchema):
    """嵌套展示用的岗位摘要"""

    id: str
    title: str
    created_by_id: str
    department: Optional[DepartmentBrief] = None
