import logging
from supabase import Client
from app.modules.user_instruments.schemas import (
    UserInstrumentCreate, UserInstrumentsReplace, UserInstrumentResponse
)
from app.core.exceptions import NotFoundError, ValidationError, ConflictError, InternalError, is_unique_violation
from app.database.supabase_client import fetch_one
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "User already plays this instrument"


class UserInstrumentService:
    """Instruments a user plays, returned as instrument rows with the user's flags."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _ensure_user(self, user_id: str) -> None:
        if not fetch_one(self.supabase, "users", user_id, "id"):
            raise NotFoundError("User not found")

    def _clear_primary(self, user_id: str) -> None:
        self.supabase.table("user_instruments")\
            .update({"is_primary": False})\
            .eq("user_id", user_id)\
            .eq("is_primary", True)\
            .execute()

    def list_for_user(self, user_id: str) -> List[UserInstrumentResponse]:
        try:
            self._ensure_user(user_id)
            rows = self.supabase.table("user_instruments")\
                .select("instrument_id, is_primary, proficiency_level")\
                .eq("user_id", user_id)\
                .execute().data
            if not rows:
                return []
            instruments = self.supabase.table("instruments")\
                .select("id, code, display_name")\
                .in_("id", [r["instrument_id"] for r in rows])\
                .execute().data
            by_id = {i["id"]: i for i in instruments}
            played = [
                UserInstrumentResponse(
                    **by_id[r["instrument_id"]],
                    is_primary=r["is_primary"],
                    proficiency_level=r.get("proficiency_level"),
                )
                for r in rows if r["instrument_id"] in by_id
            ]
            return sorted(played, key=lambda i: i.display_name)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching instruments of user {user_id}: {e}")
            raise InternalError("Could not fetch user instruments")

    def replace_for_user(self, user_id: str, data: UserInstrumentsReplace) -> List[UserInstrumentResponse]:
        """Replace everything the user plays with the given list."""
        try:
            self._ensure_user(user_id)
            instrument_ids = [i.instrument_id for i in data.instruments]
            if instrument_ids:
                known = self.supabase.table("instruments").select("id").in_("id", instrument_ids).execute()
                if len(known.data) != len(instrument_ids):
                    raise ValidationError("One or more instrument IDs are invalid")
            self.supabase.table("user_instruments").delete().eq("user_id", user_id).execute()
            if data.instruments:
                self.supabase.table("user_instruments").insert([
                    {"user_id": user_id, **i.model_dump(mode="json")} for i in data.instruments
                ]).execute()
            logger.info(f"User {user_id} now plays {len(instrument_ids)} instruments")
            return self.list_for_user(user_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating instruments of user {user_id}: {e}")
            raise InternalError("Could not update user instruments")

    def add_for_user(self, user_id: str, data: UserInstrumentCreate) -> List[UserInstrumentResponse]:
        try:
            self._ensure_user(user_id)
            if not fetch_one(self.supabase, "instruments", data.instrument_id, "id"):
                raise NotFoundError("Instrument not found")
            existing = self.supabase.table("user_instruments")\
                .select("id")\
                .eq("user_id", user_id)\
                .eq("instrument_id", data.instrument_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise ConflictError(DUPLICATE_MESSAGE)
            if data.is_primary:
                self._clear_primary(user_id)
            self.supabase.table("user_instruments")\
                .insert({"user_id": user_id, **data.model_dump(mode="json")})\
                .execute()
            return self.list_for_user(user_id)
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error adding instrument for user {user_id}: {e}")
            raise InternalError("Could not update user instruments")

    def remove_for_user(self, user_id: str, instrument_id: str) -> None:
        try:
            result = self.supabase.table("user_instruments")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("instrument_id", instrument_id)\
                .execute()
            if not result.data:
                raise NotFoundError("User does not play this instrument")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing instrument {instrument_id} from user {user_id}: {e}")
            raise InternalError("Could not update user instruments")

    def players_of(self, instrument_id: str) -> List[str]:
        rows = self.supabase.table("user_instruments")\
            .select("user_id")\
            .eq("instrument_id", instrument_id)\
            .execute().data
        return [r["user_id"] for r in rows]
