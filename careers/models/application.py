"""
求职申请模型模块

包含申请主表与状态流转历史
"""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel, utc_now

if TYPE_CHECKING:
    from .user import User
    from .job import Job
    from .interview import Interview


class ApplicationStatus(str, Enum):
    """申请状态枚举"""
    PENDING = "PENDING"                            # 待处理
    UNDER_REVIEW = "UNDER_REVIEW"                  # 审核中
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"    # 已安排面试
    INTERVIEW_COMPLETED = "INTERVIEW_COMPLETED"    # 面试完成
    ACCEPTED = "ACCEPTED"                          # 已通过
    REJECTED = "REJECTED"                          # 已拒绝
    HIRED = "HIRED"                                # 已录用


class EmploymentType(str, Enum):
    """用工类型"""
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


class Application(BaseModel):
    """
    求职申请

    状态字段只能通过 services.application_status 修改
    """
    __tablename__ = "applications"

    # ========== 外键关联 ==========
    applicant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="求职者ID"
    )
    job_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="岗位ID"
    )

    # ========== 申请信息 ==========
    job_title: Mapped[str] = mapped_column(String(200), nullable=False, comment="岗位名称快照")
    employment_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, comment="期望用工类型")
    status: Mapped[str] = mapped_column(
        String(30),
        default=ApplicationStatus.PENDING.value,
        nullable=False,
        index=True,
        comment="申请状态"
    )
    resume_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="简历文件ID")
    additional_files: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="附加文件ID列表")
    cover_letter: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="求职信")
    expected_salary: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, comment="期望薪资")
    experience: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="工作经历")
    education: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="教育背景")
    skills: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="技能")
    availability: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="到岗时间")
    references: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="推荐人")
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False, comment="提交时间")

    # ========== 关联关系 ==========
    applicant: Mapped["User"] = relationship(
        "User",
        back_populates="applications",
        foreign_keys=[applicant_id],
        lazy="selectin",
    )
    job: Mapped["Job"] = relationship("Job", back_populates="applications", lazy="selectin")
    history: Mapped[List["ApplicationHistory"]] = relationship(
        "ApplicationHistory",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(ApplicationHistory.created_at)",
        lazy="selectin",
    )
    interviews: Mapped[List["Interview"]] = relationship(
        "Interview",
        back_populates="application",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def file_ids(self) -> List[str]:
        """本申请引用的全部文件ID"""
        ids = [self.resume_url] if self.resume_url else []
        ids.extend(self.additional_files or [])
        return ids

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, job_title={self.job_title}, status={self.status})>"


class ApplicationHistory(BaseModel):
    """
    申请状态流转历史

    每次合法的状态变更写入且只写入一条
    """
    __tablename__ = "application_history"

    application_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="申请ID"
    )
    from_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, comment="原状态")
    to_status: Mapped[str] = mapped_column(String(30), nullable=False, comment="新状态")
    action: Mapped[str] = mapped_column(String(50), nullable=False, comment="动作")
    performed_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="操作人ID"
    )
    performed_by_name: Mapped[str] = mapped_column(String(200), nullable=False, comment="操作人姓名")
    performed_by_role: Mapped[str] = mapped_column(String(20), nullable=False, comment="操作人角色")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="备注")

    application: Mapped["Application"] = relationship("Application", back_populates="history")

    def __repr__(self) -> str:
        return f"<ApplicationHistory({self.from_status} -> {self.to_status}, action={self.action})>"
