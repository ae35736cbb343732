import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.users.schemas import UserResponse, UserRolesUpdate, UserActiveUpdate
from app.modules.user_instruments.service import UserInstrumentService
from app.core.exceptions import NotFoundError, InternalError
from app.database.supabase_client import fetch_one
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, email, name, phone_e164, roles, is_active, created_at, updated_at"


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            row = fetch_one(self.supabase, "users", user_id, USER_COLUMNS)
            if not row:
                raise NotFoundError("User not found")
            return UserResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise InternalError()

    def list_users(
        self,
        role: Optional[str] = None,
        active_only: bool = False,
        limit: int = 100,
        offset: int = 0,
        instrument_id: Optional[str] = None
    ) -> List[UserResponse]:
        """List users ordered by name, optionally only those holding `role` or playing `instrument_id`."""
        try:
            query = self.supabase.table("users").select(USER_COLUMNS)
            if instrument_id:
                players = UserInstrumentService(self.supabase).players_of(instrument_id)
                if not players:
                    return []
                query = query.in_("id", players)
            if role:
                query = query.contains("roles", [role])
            if active_only:
                query = query.eq("is_active", True)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [UserResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise InternalError()

    def update_roles(self, user_id: str, data: UserRolesUpdate) -> UserResponse:
        return self._update(user_id, {"roles": [r.value for r in data.roles]})

    def set_active(self, user_id: str, data: UserActiveUpdate) -> UserResponse:
        return self._update(user_id, {"is_active": data.is_active})

    def _update(self, user_id: str, update_data: dict) -> UserResponse:
        try:
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise NotFoundError("User not found")
            logger.info(f"Updated user {user_id}: {sorted(update_data)}")
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            raise InternalError()
