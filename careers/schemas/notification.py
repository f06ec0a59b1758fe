"""
站内通知相关 Schema
"""
from typing import Optional, List

from .base import BaseSchema, TimestampSchema


class NotificationResponse(TimestampSchema):
    user_id: str
    title: str
    message: str
    type: str
    is_read: bool
    application_id: Optional[str] = None
    interview_id: Optional[str] = None


class NotificationMarkRead(BaseSchema):
    """标记已读：notification_ids 为空或 mark_all 为真时标记全部"""

    notification_ids: Optional[List[str]] = None
    mark_all: bool = False


class NotificationUpdate(BaseSchema):
    is_read: bool
