import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.notifications.schemas import NotificationCreate, NotificationResponse
from app.core.exceptions import NotFoundError, InternalError
from app.database.supabase_client import fetch_one
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_for_user(self, user_id: str) -> List[NotificationResponse]:
        try:
            result = self.supabase.table("notification_logs")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("sent_at", desc=True)\
                .execute()
            return [NotificationResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing notifications for {user_id}: {e}")
            raise InternalError("Could not list notifications")

    def get_notification(self, notification_id: str) -> NotificationResponse:
        try:
            row = fetch_one(self.supabase, "notification_logs", notification_id)
            if not row:
                raise NotFoundError("Notification not found")
            return NotificationResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching notification {notification_id}: {e}")
            raise InternalError("Could not fetch notification")

    def create_notification(self, data: NotificationCreate) -> NotificationResponse:
        """Log a notification; sent_at is stamped here, not taken from the client."""
        try:
            if not fetch_one(self.supabase, "users", data.user_id, "id"):
                raise NotFoundError("User not found")
            record = data.model_dump(mode="json")
            record["sent_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("notification_logs").insert(record).execute()
            if not result.data:
                raise InternalError("Could not create notification")
            logger.info(f"Logged {data.channel.value} notification '{data.template_key}' for user {data.user_id}")
            return NotificationResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating notification: {e}")
            raise InternalError("Could not create notification")
