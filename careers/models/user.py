"""
用户与登录会话模型模块
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .application import Application
    from .job import Job
    from .interview import InterviewReview
    from .notification import Notification


class UserRole(str, Enum):
    """用户角色枚举"""
    APPLICANT = "APPLICANT"    # 求职者
    HR = "HR"                  # 招聘专员
    ADMIN = "ADMIN"            # 管理员


class User(BaseModel):
    """
    用户模型

    关联关系:
    - 1:N -> Application (作为求职者)
    - 1:N -> Job (作为岗位创建人 HR)
    - 1:N -> InterviewReview (作为面试评估人)
    - 1:N -> Notification
    - 1:N -> UserSession
    """
    __tablename__ = "users"

    # ========== 账号信息 ==========
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="登录邮箱"
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="密码哈希"
    )
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.APPLICANT.value,
        nullable=False,
        index=True,
        comment="角色"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="是否启用"
    )

    # ========== 个人资料 ==========
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, comment="名")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, comment="姓")
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, comment="电话")
    country_code: Mapped[Optional[str]] = mapped_column(String(8), nullable=True, comment="国家区号")
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="地址")
    date_of_birth: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="出生日期")
    linkedin_profile: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="LinkedIn 主页")
    profile_image: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="头像")

    # ========== 关联关系 ==========
    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="applicant",
        foreign_keys="Application.applicant_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    jobs: Mapped[List["Job"]] = relationship(
        "Job",
        back_populates="created_by",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    hr_reviews: Mapped[List["InterviewReview"]] = relationship(
        "InterviewReview",
        back_populates="hr_reviewer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notifications: Mapped[List["Notification"]] = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions: Mapped[List["UserSession"]] = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class UserSession(BaseModel):
    """
    登录会话

    只保存令牌的 sha256 摘要，令牌明文仅在登录时返回一次
    """
    __tablename__ = "user_sessions"

    token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="令牌摘要"
    )
    token_prefix: Mapped[str] = mapped_column(String(12), nullable=False, comment="令牌前缀(排查用)")
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="用户ID"
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False, comment="签发时角色")
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, comment="过期时间")
    last_seen_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="最近使用时间")
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="注销时间")

    user: Mapped["User"] = relationship("User", back_populates="sessions", lazy="selectin")

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id}, user_id={self.user_id}, prefix={self.token_prefix})>"
