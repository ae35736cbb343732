from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.notifications.schemas import NotificationCreate, NotificationResponse
from app.modules.notifications.service import NotificationService
from app.core.dependencies import get_current_user, require_permission, authorize
from app.core.schemas import DataResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("/user/{user_id}", response_model=DataResponse[List[NotificationResponse]])
async def list_user_notifications(
    user_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Notifications of a user, newest first (the user themself or admin/leader)"""
    authorize(user_data, "notifications:read", is_owner=user_data["id"] == user_id, message="Forbidden")
    return {"data": service.list_for_user(user_id)}


@router.get("/{notification_id}", response_model=DataResponse[NotificationResponse])
async def get_notification(
    notification_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    notification = service.get_notification(notification_id)
    authorize(user_data, "notifications:read", is_owner=notification.user_id == user_data["id"], message="Forbidden")
    return {"data": notification}


@router.post("", response_model=DataResponse[NotificationResponse], status_code=201)
async def create_notification(
    data: NotificationCreate,
    user_data: Dict = Depends(require_permission("notifications:create")),
    service: NotificationService = Depends(get_notification_service)
):
    return {"data": service.create_notification(data)}
