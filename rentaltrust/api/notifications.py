from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_storage
from ..auth.jwt import get_current_user
from ..schemas.schemas import NotificationRead, UserInDB
from ..services.storage import Storage

router = APIRouter()


@router.get("/", response_model=List[NotificationRead])
def list_notifications(
    storage: Storage = Depends(get_storage),
    current_user: UserInDB = Depends(get_current_user),
) -> List[NotificationRead]:
    return storage.list_notifications_by_user(current_user.id)


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    storage: Storage = Depends(get_storage),
    current_user: UserInDB = Depends(get_current_user),
) -> NotificationRead:
    notification = storage.get_notification(notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found.")
    if notification.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You don't have access to this notification")
    return storage.mark_notification_read(notification_id)
