"""
用户与认证相关 Schema
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from .base import BaseSchema, TimestampSchema


class RegisterRequest(BaseSchema):
    """求职者注册请求（格式与长度在路由中校验，返回 400）"""

    email: str = Field(..., description="邮箱")
    password: str = Field(..., description="密码，至少 8 位")
    first_name: str = Field(..., max_length=100, description="名")
    last_name: str = Field(..., max_length=100, description="姓")
    phone_number: Optional[str] = Field(None, max_length=30)
    country_code: Optional[str] = Field(None, max_length=8)


class LoginRequest(BaseSchema):
    """登录请求"""

    email: str
    password: str


class UserBrief(BaseSchema):
    """嵌套展示用的用户摘要"""

    id: str
    email: str
    first_name: str
    last_name: str


class UserResponse(TimestampSchema):
    """用户响应（不含密码哈希）"""

    email: str
    role: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    country_code: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    linkedin_profile: Optional[str] = None
    profile_image: Optional[str] = None
    is_active: bool


class LoginResponse(BaseSchema):
    """登录响应"""

    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse


class ProfileUpdate(BaseSchema):
    """个人资料更新"""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    country_code: Optional[str] = Field(None, max_length=8)
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    linkedin_profile: Optional[str] = Field(None, max_length=255)
    profile_image: Optional[str] = Field(None, max_length=255)
