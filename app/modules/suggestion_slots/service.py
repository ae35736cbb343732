import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.suggestion_slots.schemas import (
    SuggestionSlotCreate, SuggestionSlotUpdate, SuggestionSlotResponse,
    MySuggestionSlotResponse, SlotServiceSummary
)
from app.modules.suggestion_slots.models import SlotStatus
from app.core.exceptions import NotFoundError, ValidationError, CapacityError, InternalError
from app.database.supabase_client import fetch_one
from typing import Dict, List, Optional, Union
from fastapi import HTTPException

logger = logging.getLogger(__name__)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Parse a stored timestamp; naive values are taken as UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def is_past_due(slot: dict, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now > parse_timestamp(slot["due_at"])


class SuggestionSlotService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _with_details(self, rows: List[dict], response_cls=SuggestionSlotResponse) -> list:
        slot_ids = [r["id"] for r in rows]
        user_ids = list({r["assigned_user_id"] for r in rows})
        suggestions: Dict[str, list] = {slot_id: [] for slot_id in slot_ids}
        users: Dict[str, dict] = {}
        if slot_ids:
            result = self.supabase.table("suggestions")\
                .select("*")\
                .in_("slot_id", slot_ids)\
                .order("created_at")\
                .execute()
            for suggestion in result.data:
                suggestions.setdefault(suggestion["slot_id"], []).append(suggestion)
        if user_ids:
            result = self.supabase.table("users").select("id, name, email").in_("id", user_ids).execute()
            users = {u["id"]: u for u in result.data}
        return [
            response_cls(**r, assigned_user=users.get(r["assigned_user_id"]), suggestions=suggestions.get(r["id"], []))
            for r in rows
        ]

    def list_slots(self) -> List[SuggestionSlotResponse]:
        try:
            result = self.supabase.table("suggestion_slots").select("*").order("due_at").execute()
            return self._with_details(result.data)
        except Exception as e:
            logger.error(f"Error listing suggestion slots: {e}")
            raise InternalError("Could not list slots")

    def list_for_set(self, set_id: str) -> List[SuggestionSlotResponse]:
        try:
            result = self.supabase.table("suggestion_slots")\
                .select("*")\
                .eq("set_id", set_id)\
                .order("due_at")\
                .execute()
            return self._with_details(result.data)
        except Exception as e:
            logger.error(f"Error listing slots for set {set_id}: {e}")
            raise InternalError("Could not list slots")

    def get_slot(self, slot_id: str) -> SuggestionSlotResponse:
        try:
            row = fetch_one(self.supabase, "suggestion_slots", slot_id)
            if not row:
                raise NotFoundError("Suggestion slot not found")
            return self._with_details([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching slot {slot_id}: {e}")
            raise InternalError("Could not fetch slot")

    def create_slot(self, data: SuggestionSlotCreate) -> SuggestionSlotResponse:
        try:
            if not fetch_one(self.supabase, "worship_sets", data.set_id, "id"):
                raise NotFoundError("Worship set not found")
            if not fetch_one(self.supabase, "users", data.assigned_user_id, "id"):
                raise NotFoundError("User not found")
            record = data.model_dump(mode="json")
            record["status"] = SlotStatus.PENDING.value
            result = self.supabase.table("suggestion_slots").insert(record).execute()
            if not result.data:
                raise InternalError("Could not create slot")
            logger.info(f"Created suggestion slot {result.data[0]['id']} for user {data.assigned_user_id}")
            return self._with_details(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating suggestion slot: {e}")
            raise InternalError("Could not create slot")

    def update_slot(self, slot_id: str, data: SuggestionSlotUpdate) -> SuggestionSlotResponse:
        try:
            row = fetch_one(self.supabase, "suggestion_slots", slot_id)
            if not row:
                raise NotFoundError("Suggestion slot not found")
            update_data = data.model_dump(mode="json", exclude_unset=True)
            min_songs = update_data.get("min_songs", row["min_songs"])
            max_songs = update_data.get("max_songs", row["max_songs"])
            if min_songs > max_songs:
                raise ValidationError("minSongs cannot be greater than maxSongs")
            if max_songs < row["max_songs"]:
                held = self.supabase.table("suggestions").select("id").eq("slot_id", slot_id).execute()
                if len(held.data) > max_songs:
                    raise CapacityError(
                        f"Slot already holds {len(held.data)} suggestions; maxSongs cannot be lower"
                    )
            if update_data:
                self.supabase.table("suggestion_slots").update(update_data).eq("id", slot_id).execute()
            return self.get_slot(slot_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating slot {slot_id}: {e}")
            raise InternalError("Could not update slot")

    def reassign(self, slot_id: str, user_id: str) -> SuggestionSlotResponse:
        """Hand the slot to another user; suggestions already made stay."""
        try:
            if not fetch_one(self.supabase, "users", user_id, "id"):
                raise ValidationError("User not found")
            result = self.supabase.table("suggestion_slots")\
                .update({"assigned_user_id": user_id})\
                .eq("id", slot_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Suggestion slot not found")
            logger.info(f"Reassigned suggestion slot {slot_id} to user {user_id}")
            return self._with_details(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error reassigning slot {slot_id}: {e}")
            raise InternalError("Could not assign user to suggestion slot")

    def delete_slot(self, slot_id: str) -> None:
        try:
            if not fetch_one(self.supabase, "suggestion_slots", slot_id, "id"):
                raise NotFoundError("Suggestion slot not found")
            self.supabase.table("suggestions").delete().eq("slot_id", slot_id).execute()
            self.supabase.table("suggestion_slots").delete().eq("id", slot_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting slot {slot_id}: {e}")
            raise InternalError("Could not delete slot")

    def my_slots(self, user_id: str) -> List[MySuggestionSlotResponse]:
        """The caller's slots by due date; overdue pending slots report as missed."""
        try:
            result = self.supabase.table("suggestion_slots")\
                .select("*")\
                .eq("assigned_user_id", user_id)\
                .order("due_at")\
                .execute()
            slots = self._with_details(result.data, MySuggestionSlotResponse)
            services = self._services_for_sets([s.set_id for s in slots])
            now = datetime.now(timezone.utc)
            for slot in slots:
                slot.suggestion_count = len(slot.suggestions)
                slot.is_overdue = slot.status == SlotStatus.PENDING and now > parse_timestamp(slot.due_at)
                if slot.is_overdue:
                    slot.status = SlotStatus.MISSED
                slot.service = services.get(slot.set_id)
            return slots
        except Exception as e:
            logger.error(f"Error fetching suggestion assignments for {user_id}: {e}")
            raise InternalError("Could not fetch your suggestion assignments")

    def _services_for_sets(self, set_ids: List[str]) -> Dict[str, SlotServiceSummary]:
        if not set_ids:
            return {}
        sets = self.supabase.table("worship_sets")\
            .select("id, service_id")\
            .in_("id", list(set(set_ids)))\
            .execute().data
        service_ids = list({s["service_id"] for s in sets})
        if not service_ids:
            return {}
        services = {
            s["id"]: s for s in self.supabase.table("services")
            .select("id, service_date, service_type_id")
            .in_("id", service_ids)
            .execute().data
        }
        type_ids = list({s["service_type_id"] for s in services.values()})
        type_names = {}
        if type_ids:
            type_names = {
                t["id"]: t["name"] for t in self.supabase.table("service_types")
                .select("id, name")
                .in_("id", type_ids)
                .execute().data
            }
        summaries = {}
        for s in sets:
            service = services.get(s["service_id"])
            if service:
                summaries[s["id"]] = SlotServiceSummary(
                    **service, service_type_name=type_names.get(service["service_type_id"])
                )
        return summaries
