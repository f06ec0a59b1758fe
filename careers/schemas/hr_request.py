"""
HR 账号申请相关 Schema
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field

from .base import BaseSchema, TimestampSchema


class HRRequestCreate(BaseSchema):
    """提交 HR 账号申请"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255)
    phone_number: Optional[str] = Field(None, max_length=30)
    department: str = Field(..., min_length=1, max_length=100, description="部门名称")
    reason: Optional[str] = None


class HRRequestAction(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class HRRequestProcess(BaseSchema):
    """审批 HR 账号申请"""

    action: HRRequestAction
    password: Optional[str] = Field(None, description="通过时为新 HR 设置的初始密码")
    rejection_reason: Optional[str] = None


class HRRequestResponse(TimestampSchema):
    """HR 账号申请响应"""

    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    department: str
    reason: Optional[str] = None
    status: str
    requested_by: str
    requested_by_name: str
    approved_by: Optional[str] = None
    approved_by_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
