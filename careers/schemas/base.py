"""
Schema 基类
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """所有 Schema 的基类"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class TimestampSchema(BaseSchema):
    """带主键与时间戳的响应基类"""

    id: str
    created_at: datetime
    updated_at: datetime
