"""
部门模型
"""
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .job import Job


class Department(BaseModel):
    """
    部门模型

    关联关系:
    - 1:N -> Job
    """
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
        comment="部门名称"
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, comment="部门描述")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, comment="是否启用")

    jobs: Mapped[List["Job"]] = relationship(
        "Job",
        back_populates="department",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name={self.name})>"
