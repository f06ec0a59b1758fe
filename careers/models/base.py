"""
模型基类模块

定义通用字段和混入类
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column

from careers.core.database import Base


def utc_now() -> datetime:
    """当前 UTC 时间（naive，与 SQLite 存储保持一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    """时间戳混入类"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
        comment="创建时间"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        comment="更新时间"
    )


class BaseModel(Base, TimestampMixin):
    """
    模型基类

    包含:
    - UUID 主键
    - 创建时间
    - 更新时间
    """
    __abstract__ = True

    id: Mapped[str] = mapped_column(
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="主键ID"
    )
