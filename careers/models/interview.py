"""
面试与面试评估模型模块
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .user import User
    from .application import Application


class InterviewType(str, Enum):
    """面试形式"""
    VIDEO = "VIDEO"
    PHONE = "PHONE"
    IN_PERSON = "IN_PERSON"
    TECHNICAL = "TECHNICAL"


class InterviewStatus(str, Enum):
    """面试状态"""
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Recommendation(str, Enum):
    """面试评估结论"""
    STRONGLY_RECOMMEND = "STRONGLY_RECOMMEND"
    RECOMMEND = "RECOMMEND"
    NEUTRAL = "NEUTRAL"
    NOT_RECOMMEND = "NOT_RECOMMEND"
    STRONGLY_NOT_RECOMMEND = "STRONGLY_NOT_RECOMMEND"

    @property
    def is_positive(self) -> bool:
        return self in (Recommendation.STRONGLY_RECOMMEND, Recommendation.RECOMMEND)


class Interview(BaseModel):
    """
    面试安排

    关联关系:
    - N:1 -> Application
    - N:1 -> User (候选人)
    - 1:N -> InterviewReview
    """
    __tablename__ = "interviews"

    # ========== 外键关联 ==========
    application_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="申请ID"
    )
    candidate_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="候选人ID"
    )
    scheduled_by_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="安排人ID"
    )

    # ========== 面试信息 ==========
    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True, comment="面试时间")
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False, comment="时长(分钟)")
    interview_type: Mapped[str] = mapped_column(
        String(20),
        default=InterviewType.VIDEO.value,
        nullable=False,
        comment="面试形式"
    )
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="地点")
    meeting_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True, comment="会议链接")
    interviewer: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, comment="面试官")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="备注")
    status: Mapped[str] = mapped_column(
        String(20),
        default=InterviewStatus.SCHEDULED.value,
        nullable=False,
        index=True,
        comment="面试状态"
    )

    # ========== 关联关系 ==========
    application: Mapped["Application"] = relationship(
        "Application", back_populates="interviews", lazy="selectin"
    )
    candidate: Mapped["User"] = relationship("User", foreign_keys=[candidate_id], lazy="selectin")
    reviews: Mapped[List["InterviewReview"]] = relationship(
        "InterviewReview",
        back_populates="interview",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Interview(id={self.id}, at={self.scheduled_at}, status={self.status})>"


class InterviewReview(BaseModel):
    """面试评估（每位评估人对同一场面试只能提交一次）"""
    __tablename__ = "interview_reviews"
    __table_args__ = (
        UniqueConstraint("interview_id", "hr_reviewer_id", name="uq_review_interview_reviewer"),
    )

    interview_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("interviews.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="面试ID"
    )
    hr_reviewer_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="评估人ID"
    )

    # ========== 评分 (1-5) ==========
    technical_skills: Mapped[int] = mapped_column(Integer, nullable=False, comment="技术能力")
    communication: Mapped[int] = mapped_column(Integer, nullable=False, comment="沟通能力")
    cultural_fit: Mapped[int] = mapped_column(Integer, nullable=False, comment="文化匹配")
    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False, comment="综合评分")
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="评语")
    recommendation: Mapped[str] = mapped_column(String(30), nullable=False, comment="结论")

    interview: Mapped["Interview"] = relationship("Interview", back_populates="reviews")
    hr_reviewer: Mapped["User"] = relationship("User", back_populates="hr_reviews", lazy="selectin")
