"""
系统设置模型（键值对）
"""
from typing import Optional
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class SystemSetting(BaseModel):
    """系统设置"""
    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True, comment="键")
    value: Mapped[str] = mapped_column(Text, nullable=False, comment="值")
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="说明")

    def __repr__(self) -> str:
        return f"<SystemSetting(key={self.key})>"
