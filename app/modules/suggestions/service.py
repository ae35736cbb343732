import logging
from supabase import Client
from app.modules.suggestions.schemas import (
    SuggestionCreate, SuggestionUpdate, SuggestionResponse, SetSuggestionResponse
)
from app.modules.suggestions.models import SuggestionStatus
from app.modules.suggestion_slots.models import SlotStatus
from app.modules.suggestion_slots.service import is_past_due
from app.modules.set_songs.service import SetSongService
from app.modules.set_songs.schemas import SetSongResponse
from app.core.exceptions import (
    NotFoundError, ValidationError, ConflictError, CapacityError, InternalError, is_unique_violation
)
from app.database.supabase_client import fetch_one
from typing import Dict, List
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "This song has already been suggested for this slot"


class SuggestionService:
    """Suggestions made through slots, and their approval into set songs."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _songs(self, song_ids: List[str]) -> Dict[str, dict]:
        if not song_ids:
            return {}
        result = self.supabase.table("songs")\
            .select("id, title, artist, familiarity_score")\
            .in_("id", list(set(song_ids)))\
            .execute()
        return {s["id"]: s for s in result.data}

    def _with_songs(self, rows: List[dict]) -> List[SuggestionResponse]:
        songs = self._songs([r["song_id"] for r in rows])
        return [SuggestionResponse(**r, song=songs.get(r["song_id"])) for r in rows]

    def get_row(self, suggestion_id: str) -> dict:
        row = fetch_one(self.supabase, "suggestions", suggestion_id)
        if not row:
            raise NotFoundError("Suggestion not found")
        return row

    def get_slot_row(self, slot_id: str) -> dict:
        slot = fetch_one(self.supabase, "suggestion_slots", slot_id)
        if not slot:
            raise NotFoundError("Suggestion slot not found")
        return slot

    def get_suggestion(self, suggestion_id: str) -> SuggestionResponse:
        try:
            return self._with_songs([self.get_row(suggestion_id)])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching suggestion {suggestion_id}: {e}")
            raise InternalError("Could not fetch suggestion")

    def list_for_slot(self, slot_id: str) -> List[SuggestionResponse]:
        try:
            result = self.supabase.table("suggestions")\
                .select("*")\
                .eq("slot_id", slot_id)\
                .order("created_at")\
                .execute()
            return self._with_songs(result.data)
        except Exception as e:
            logger.error(f"Error listing suggestions for slot {slot_id}: {e}")
            raise InternalError("Could not list suggestions")

    def list_for_set(self, set_id: str) -> List[SetSuggestionResponse]:
        try:
            slots = self.supabase.table("suggestion_slots")\
                .select("id, assigned_user_id, due_at")\
                .eq("set_id", set_id)\
                .execute().data
            if not slots:
                return []
            slot_by_id = {s["id"]: s for s in slots}
            rows = self.supabase.table("suggestions")\
                .select("*")\
                .in_("slot_id", list(slot_by_id))\
                .order("created_at")\
                .execute().data
            user_ids = list({s["assigned_user_id"] for s in slots})
            names = {
                u["id"]: u.get("name") for u in self.supabase.table("users")
                .select("id, name")
                .in_("id", user_ids)
                .execute().data
            }
            songs = self._songs([r["song_id"] for r in rows])
            flattened = []
            for r in rows:
                slot = slot_by_id[r["slot_id"]]
                flattened.append(SetSuggestionResponse(
                    **r,
                    song=songs.get(r["song_id"]),
                    set_id=set_id,
                    suggested_by_id=slot["assigned_user_id"],
                    suggested_by_name=names.get(slot["assigned_user_id"]),
                    slot_due_at=slot["due_at"],
                ))
            return flattened
        except Exception as e:
            logger.error(f"Error listing suggestions for set {set_id}: {e}")
            raise InternalError("Could not list suggestions")

    def submit(self, slot: dict, data: SuggestionCreate) -> SuggestionResponse:
        """Add a suggestion to a slot the caller has already been authorized for."""
        try:
            if not fetch_one(self.supabase, "songs", data.song_id, "id"):
                raise NotFoundError("Song not found")
            existing = self.supabase.table("suggestions")\
                .select("id, song_id")\
                .eq("slot_id", slot["id"])\
                .execute().data
            if len(existing) >= slot["max_songs"]:
                raise CapacityError(f"This slot already has the maximum of {slot['max_songs']} suggestions")
            if is_past_due(slot):
                raise ValidationError("The due date for this suggestion slot has passed")
            if any(s["song_id"] == data.song_id for s in existing):
                raise ConflictError(DUPLICATE_MESSAGE)

            record = data.model_dump(mode="json", exclude_none=True)
            record["status"] = SuggestionStatus.PENDING.value
            result = self.supabase.table("suggestions").insert(record).execute()
            if not result.data:
                raise InternalError("Could not create suggestion")

            if len(existing) + 1 >= slot["min_songs"] and slot["status"] == SlotStatus.PENDING.value:
                self.supabase.table("suggestion_slots")\
                    .update({"status": SlotStatus.SUBMITTED.value})\
                    .eq("id", slot["id"])\
                    .execute()
            logger.info(f"Suggestion {result.data[0]['id']} submitted to slot {slot['id']}")
            return self._with_songs(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error submitting suggestion to slot {slot.get('id')}: {e}")
            raise InternalError("Could not create suggestion")

    def update_suggestion(self, suggestion_id: str, data: SuggestionUpdate) -> SuggestionResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self.get_suggestion(suggestion_id)
            result = self.supabase.table("suggestions").update(update_data).eq("id", suggestion_id).execute()
            if not result.data:
                raise NotFoundError("Suggestion not found")
            return self._with_songs(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating suggestion {suggestion_id}: {e}")
            raise InternalError("Could not update suggestion")

    def delete_suggestion(self, suggestion_id: str) -> None:
        try:
            result = self.supabase.table("suggestions").delete().eq("id", suggestion_id).execute()
            if not result.data:
                raise NotFoundError("Suggestion not found")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting suggestion {suggestion_id}: {e}")
            raise InternalError("Could not delete suggestion")

    def approve(self, suggestion: dict, slot: dict, song_version_id: str) -> SetSongResponse:
        """Turn a suggestion into the next set song of the slot's worship set."""
        try:
            if suggestion["status"] == SuggestionStatus.APPROVED.value:
                raise ValidationError("Suggestion has already been approved")
            version = fetch_one(self.supabase, "song_versions", song_version_id, "id, song_id")
            if not version:
                raise NotFoundError("Song version not found")
            if version["song_id"] != suggestion["song_id"]:
                raise ValidationError("Song version does not belong to the suggested song")

            # Claim the suggestion first; only a pending row can be approved once
            claimed = self.supabase.table("suggestions")\
                .update({"status": SuggestionStatus.APPROVED.value})\
                .eq("id", suggestion["id"])\
                .eq("status", SuggestionStatus.PENDING.value)\
                .execute()
            if not claimed.data:
                raise ValidationError("Suggestion has already been approved")
            try:
                set_song = SetSongService(self.supabase).add_song(
                    set_id=slot["set_id"],
                    song_version_id=song_version_id,
                    youtube_url_override=suggestion.get("youtube_url_override"),
                    notes=suggestion.get("notes"),
                )
            except Exception:
                self.supabase.table("suggestions")\
                    .update({"status": SuggestionStatus.PENDING.value})\
                    .eq("id", suggestion["id"])\
                    .execute()
                raise
            logger.info(f"Approved suggestion {suggestion['id']} into set {slot['set_id']}")
            return set_song
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error approving suggestion {suggestion.get('id')}: {e}")
            raise InternalError("Could not approve suggestion")

    def reject(self, suggestion_id: str) -> None:
        """Rejecting removes the suggestion; nothing else changes."""
        self.delete_suggestion(suggestion_id)
        logger.info(f"Rejected suggestion {suggestion_id}")
