"""
邮件日志与邮件模板模型
"""
from enum import Enum
from typing import Optional
from sqlalchemy import String, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class EmailType(str, Enum):
    """邮件类型"""
    SUBMISSION = "SUBMISSION"
    INTERVIEW = "INTERVIEW"
    HIRED = "HIRED"
    REJECTED = "REJECTED"


class EmailStatus(str, Enum):
    """发送结果"""
    SENT = "SENT"
    FAILED = "FAILED"


class EmailLog(BaseModel):
    """邮件发送日志（每次发送尝试一条）"""
    __tablename__ = "email_logs"

    application_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        comment="关联申请"
    )
    email_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True, comment="邮件类型")
    recipient_email: Mapped[str] = mapped_column(String(255), nullable=False, comment="收件人")
    cc_emails: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="抄送列表")
    subject: Mapped[str] = mapped_column(String(255), nullable=False, comment="主题")
    body: Mapped[str] = mapped_column(Text, nullable=False, comment="正文")
    status: Mapped[str] = mapped_column(String(10), nullable=False, comment="发送结果")
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="失败原因")

    def __repr__(self) -> str:
        return f"<EmailLog(id={self.id}, type={self.email_type}, status={self.status})>"


class EmailTemplate(BaseModel):
    """
    邮件模板

    subject/body 使用 str.format 占位符，如 {applicant_name}、{job_title}
    """
    __tablename__ = "email_templates"

    email_type: Mapped[str] = mapped_column(String(20), nullable=False, unique=True, comment="邮件类型")
    subject: Mapped[str] = mapped_column(String(255), nullable=False, comment="主题模板")
    body: Mapped[str] = mapped_column(Text, nullable=False, comment="正文模板")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, comment="是否启用")
