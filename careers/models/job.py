"""
招聘岗位模型模块
"""
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import String, Text, Boolean, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .user import User
    from .department import Department
    from .application import Application


class Job(BaseModel):
    """
    招聘岗位

    关联关系:
    - N:1 -> Department
    - N:1 -> User (创建人)
    - 1:1 -> JobDescription
    - 1:N -> Application
    """
    __tablename__ = "jobs"

    # ========== 基本信息 ==========
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True, comment="岗位名称")
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="岗位简介")
    employment_types: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        comment="用工类型列表 (FULL_TIME/PART_TIME/CONTRACT/INTERNSHIP)"
    )
    required_skills: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="技能要求")
    salary_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="最低薪资")
    salary_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="最高薪资")
    application_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, comment="截止日期")

    # ========== 发布状态 ==========
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True, comment="是否开放")
    is_draft: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, comment="是否草稿")

    # ========== 外键关联 ==========
    department_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="所属部门"
    )
    created_by_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="创建人"
    )

    # ========== 关联关系 ==========
    department: Mapped[Optional["Department"]] = relationship(
        "Department", back_populates="jobs", lazy="selectin"
    )
    created_by: Mapped["User"] = relationship(
        "User", back_populates="jobs", lazy="selectin"
    )
    description: Mapped[Optional["JobDescription"]] = relationship(
        "JobDescription",
        back_populates="job",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    applications: Mapped[List["Application"]] = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title}, active={self.is_active})>"


class JobDescription(BaseModel):
    """岗位详细描述（与 Job 一对一）"""
    __tablename__ = "job_descriptions"

    job_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="岗位ID"
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="详细描述")
    responsibilities: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="工作职责")
    requirements: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="任职要求")
    benefits: Mapped[list] = mapped_column(JSON, default=list, nullable=False, comment="福利")
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, comment="工作地点")
    remote_work: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, comment="是否支持远程")

    job: Mapped["Job"] = relationship("Job", back_populates="description")
