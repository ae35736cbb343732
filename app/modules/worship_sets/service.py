import logging
from supabase import Client
from app.modules.worship_sets.schemas import (
    WorshipSetCreate, WorshipSetUpdate, WorshipSetResponse, WorshipSetDetailResponse
)
from app.modules.worship_sets.models import SetStatus
from app.modules.set_songs.service import SetSongService
from app.modules.assignments.service import AssignmentService
from app.modules.suggestion_slots.service import SuggestionSlotService
from app.modules.leader_rotations.service import LeaderRotationService
from app.modules.leader_rotations.schemas import LeaderRotationResponse
from app.modules.users.models import Role
from app.core.exceptions import NotFoundError, ValidationError, ConflictError, InternalError, is_unique_violation
from app.database.supabase_client import fetch_one
from app.config.settings import settings
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class WorshipSetService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _leaders(self, rows: List[dict]) -> Dict[str, dict]:
        leader_ids = list({r["leader_user_id"] for r in rows if r.get("leader_user_id")})
        if not leader_ids:
            return {}
        result = self.supabase.table("users").select("id, name, email").in_("id", leader_ids).execute()
        return {u["id"]: u for u in result.data}

    def _to_response(self, row: dict, leaders: Optional[Dict[str, dict]] = None) -> WorshipSetResponse:
        leaders = leaders if leaders is not None else self._leaders([row])
        return WorshipSetResponse(**row, leader_user=leaders.get(row.get("leader_user_id")))

    def _get_row(self, set_id: str) -> dict:
        row = fetch_one(self.supabase, "worship_sets", set_id)
        if not row:
            raise NotFoundError("Worship set not found")
        return row

    def list_sets(self) -> List[WorshipSetResponse]:
        """Every worship set with its song count, latest service first."""
        try:
            sets = self.supabase.table("worship_sets").select("*").execute().data
            if not sets:
                return []
            services = self.supabase.table("services")\
                .select("id, service_date")\
                .in_("id", [s["service_id"] for s in sets])\
                .execute()
            service_dates = {s["id"]: s["service_date"] for s in services.data}
            songs = self.supabase.table("set_songs")\
                .select("set_id")\
                .in_("set_id", [s["id"] for s in sets])\
                .execute()
            counts: Dict[str, int] = {}
            for song in songs.data:
                counts[song["set_id"]] = counts.get(song["set_id"], 0) + 1

            sets.sort(key=lambda s: service_dates.get(s["service_id"]) or "", reverse=True)
            leaders = self._leaders(sets)
            return [
                WorshipSetResponse(
                    **s, leader_user=leaders.get(s.get("leader_user_id")), song_count=counts.get(s["id"], 0)
                )
                for s in sets
            ]
        except Exception as e:
            logger.error(f"Error listing worship sets: {e}")
            raise InternalError("Could not fetch worship sets")

    def get_for_service(self, service_id: str) -> WorshipSetDetailResponse:
        """A service's worship set with set songs, slots (with suggestions) and assignments."""
        try:
            result = self.supabase.table("worship_sets")\
                .select("*")\
                .eq("service_id", service_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise NotFoundError("Worship set not found")
            return self.get_detail(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching worship set for service {service_id}: {e}")
            raise InternalError("Could not fetch worship set")

    def get_detail(self, row: dict) -> WorshipSetDetailResponse:
        set_id = row["id"]
        set_songs = SetSongService(self.supabase).list_for_set(set_id)
        assignments = AssignmentService(self.supabase).list_for_set(set_id)
        slots = SuggestionSlotService(self.supabase).list_for_set(set_id)
        leaders = self._leaders([row])
        return WorshipSetDetailResponse(
            **row,
            leader_user=leaders.get(row.get("leader_user_id")),
            song_count=len(set_songs),
            set_songs=set_songs,
            assignments=assignments,
            suggestion_slots=slots,
        )

    def create_set(self, data: WorshipSetCreate) -> WorshipSetDetailResponse:
        try:
            service = fetch_one(self.supabase, "services", data.service_id, "id, service_type_id")
            if not service:
                raise NotFoundError("Service not found")
            row = self.create_for_service(
                service, notes=data.notes,
                suggest_due_at=data.model_dump(mode="json").get("suggest_due_at"),
            )
            return self.get_detail(row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating worship set: {e}")
            raise InternalError("Could not create worship set")

    def create_for_service(self, service: dict, notes: Optional[str] = None, suggest_due_at: Optional[str] = None) -> dict:
        """Create the draft set of a service and invite the service type's default players."""
        existing = self.supabase.table("worship_sets")\
            .select("id")\
            .eq("service_id", service["id"])\
            .limit(1)\
            .execute()
        if existing.data:
            raise ConflictError("This service already has a worship set")
        record = {"service_id": service["id"], "status": SetStatus.DRAFT.value}
        if notes is not None:
            record["notes"] = notes
        if suggest_due_at is not None:
            record["suggest_due_at"] = suggest_due_at
        try:
            result = self.supabase.table("worship_sets").insert(record).execute()
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("This service already has a worship set")
            raise
        row = result.data[0]
        invited = AssignmentService(self.supabase).copy_defaults(row["id"], service["service_type_id"])
        logger.info(f"Created worship set {row['id']} for service {service['id']} ({invited} default assignments)")
        return row

    def validate_publishable(self, set_id: str) -> None:
        songs = self.supabase.table("set_songs").select("id, is_new").eq("set_id", set_id).execute().data
        if len(songs) > settings.set_song_limit:
            raise ValidationError(f"Cannot publish worship set with more than {settings.set_song_limit} songs")
        if sum(1 for s in songs if s.get("is_new")) > settings.new_song_limit:
            raise ValidationError(f"Cannot publish worship set with more than {settings.new_song_limit} new song")

    def update_set(self, set_id: str, data: WorshipSetUpdate) -> WorshipSetResponse:
        try:
            row = self._get_row(set_id)
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self._to_response(row)
            if update_data.get("status") == SetStatus.PUBLISHED.value and row["status"] != SetStatus.PUBLISHED.value:
                self.validate_publishable(set_id)
            result = self.supabase.table("worship_sets").update(update_data).eq("id", set_id).execute()
            if not result.data:
                raise NotFoundError("Worship set not found")
            return self._to_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating worship set {set_id}: {e}")
            raise InternalError("Could not update worship set")

    def publish(self, set_id: str) -> WorshipSetResponse:
        return self.update_set(set_id, WorshipSetUpdate(status=SetStatus.PUBLISHED))

    def delete_set(self, set_id: str) -> None:
        try:
            self._get_row(set_id)
            self.delete_cascade(set_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting worship set {set_id}: {e}")
            raise InternalError("Could not delete worship set")

    def delete_cascade(self, set_id: str) -> None:
        """Delete a set and everything it owns, children first.

        Each step is its own statement, so a failure part-way leaves the set
        and its remaining children in place but never an orphaned child row.
        """
        slots = self.supabase.table("suggestion_slots").select("id").eq("set_id", set_id).execute().data
        slot_ids = [s["id"] for s in slots]
        if slot_ids:
            self.supabase.table("suggestions").delete().in_("slot_id", slot_ids).execute()
        self.supabase.table("suggestion_slots").delete().eq("set_id", set_id).execute()
        self.supabase.table("set_songs").delete().eq("set_id", set_id).execute()
        self.supabase.table("assignments").delete().eq("set_id", set_id).execute()
        self.supabase.table("worship_sets").delete().eq("id", set_id).execute()
        logger.info(f"Deleted worship set {set_id} with {len(slot_ids)} suggestion slots")

    def assign_leader(self, set_id: str, leader_user_id: Optional[str]) -> WorshipSetResponse:
        """Manual override of the set leader; does not change the rotation."""
        try:
            self._get_row(set_id)
            if leader_user_id:
                user = fetch_one(self.supabase, "users", leader_user_id, "id, roles")
                if not user or Role.LEADER.value not in (user.get("roles") or []):
                    raise ValidationError("User must have leader role to be assigned")
            result = self.supabase.table("worship_sets")\
                .update({"leader_user_id": leader_user_id})\
                .eq("id", set_id)\
                .execute()
            return self._to_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error assigning leader to worship set {set_id}: {e}")
            raise InternalError("Could not assign leader")

    def suggested_leader(self, set_id: str) -> LeaderRotationResponse:
        try:
            row = self._get_row(set_id)
            service = fetch_one(self.supabase, "services", row["service_id"], "id, service_type_id")
            if not service:
                raise NotFoundError("Service not found")
            return LeaderRotationService(self.supabase).next_leader(service["service_type_id"])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error getting suggested leader for {set_id}: {e}")
            raise InternalError("Could not determine suggested leader")
