"""
站内通知 API 路由

用户只能访问自己的通知
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from careers.core.database import get_db
from careers.core.exceptions import NotFoundException
from careers.core.response import success_response, ResponseModel, MessageResponse, DictResponse
from careers.core.security import get_current_user
from careers.crud import notification_crud
from careers.models import Notification, User
from careers.schemas.notification import NotificationMarkRead, NotificationResponse, NotificationUpdate

router = APIRouter()


async def get_own_notification(db: AsyncSession, notification_id: str, user: User) -> Notification:
    notification = await notification_crud.get(db, notification_id)
    # 他人的通知同样按不存在处理
    if notification is None or notification.user_id != user.id:
        raise NotFoundException("Notification not found")
    return notification


@router.get("", summary="获取通知列表", response_model=DictResponse)
async def get_notifications(
    unread_only: bool = Query(False, description="只看未读"),
    limit: int = Query(50, ge=1, le=200, description="返回数量"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notifications = await notification_crud.get_for_user(
        db, current_user.id, unread_only=unread_only, limit=limit
    )
    unread_count = await notification_crud.count_unread(db, current_user.id)
    return success_response(data={
        "notifications": [NotificationResponse.model_validate(n).model_dump() for n in notifications],
        "unread_count": unread_count,
    })


@router.post("/mark-read", summary="标记通知已读", response_model=DictResponse)
async def mark_notifications_read(
    data: NotificationMarkRead,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """指定 notification_ids 时只标记这些通知，否则（或 mark_all）标记全部"""
    ids = None if data.mark_all else data.notification_ids
    updated = await notification_crud.mark_read(db, current_user.id, notification_ids=ids)
    return success_response(
        data={"updated": updated},
        message="Notifications marked as read"
    )


@router.get("/{notification_id}", summary="获取通知详情", response_model=ResponseModel[NotificationResponse])
async def get_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await get_own_notification(db, notification_id, current_user)
    return success_response(data=NotificationResponse.model_validate(notification).model_dump())


@router.patch("/{notification_id}", summary="更新通知", response_model=ResponseModel[NotificationResponse])
async def update_notification(
    notification_id: str,
    data: NotificationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await get_own_notification(db, notification_id, current_user)
    notification.is_read = data.is_read
    await db.flush()
    await db.refresh(notification)
    return success_response(
        data=NotificationResponse.model_validate(notification).model_dump(),
        message="Notification updated"
    )


@router.delete("/{notification_id}", summary="删除通知", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await get_own_notification(db, notification_id, current_user)
    await notification_crud.delete(db, id=notification_id)
    return success_response(message="Notification deleted")
