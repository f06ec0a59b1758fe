"""
HR 账号申请模型
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class HRRequestStatus(str, Enum):
    """申请处理状态"""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class HRRequest(BaseModel):
    """
    HR 账号开通申请

    由现有 HR 提交，管理员审批通过后创建 HR 用户
    """
    __tablename__ = "hr_requests"

    # ========== 申请人信息 ==========
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, comment="名")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, comment="姓")
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True, comment="邮箱")
    phone_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, comment="电话")
    department: Mapped[str] = mapped_column(String(100), nullable=False, comment="部门名称")
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="申请理由")

    # ========== 审批信息 ==========
    status: Mapped[str] = mapped_column(
        String(20),
        default=HRRequestStatus.PENDING.value,
        nullable=False,
        index=True,
        comment="状态"
    )
    requested_by: Mapped[str] = mapped_column(String(36), nullable=False, index=True, comment="提交人ID")
    requested_by_name: Mapped[str] = mapped_column(String(200), nullable=False, comment="提交人姓名")
    approved_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, comment="审批人ID")
    approved_by_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, comment="审批人姓名")
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="审批时间")
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="拒绝原因")

    def __repr__(self) -> str:
        return f"<HRRequest(id={self.id}, email={self.email}, status={self.status})>"
