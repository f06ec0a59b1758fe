"""
站内通知模型
"""
from typing import TYPE_CHECKING, Optional
from sqlalchemy import String, Text, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .user import User


class Notification(BaseModel):
    """站内通知"""
    __tablename__ = "notifications"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="接收人ID"
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False, comment="标题")
    message: Mapped[str] = mapped_column(Text, nullable=False, comment="内容")
    type: Mapped[str] = mapped_column(String(20), default="in-app", nullable=False, comment="通知类型")
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True, comment="是否已读")
    application_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=True,
        comment="关联申请"
    )
    interview_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=True,
        comment="关联面试"
    )

    user: Mapped["User"] = relationship("User", back_populates="notifications")

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, title={self.title}, read={self.is_read})>"
