import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.assignments.schemas import AssignmentCreate, AssignmentsUpsert, AssignmentResponse
from app.modules.assignments.models import AssignmentStatus, RESPONSE_TRANSITIONS
from app.core.exceptions import (
    NotFoundError, ConflictError, CapacityError, ForbiddenError, InternalError, is_unique_violation
)
from app.database.supabase_client import fetch_one
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "This user is already assigned to this instrument for this worship set"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AssignmentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _with_details(self, rows: List[dict]) -> List[AssignmentResponse]:
        instrument_ids = list({r["instrument_id"] for r in rows})
        user_ids = list({r["user_id"] for r in rows})
        instruments: Dict[str, dict] = {}
        users: Dict[str, dict] = {}
        if instrument_ids:
            result = self.supabase.table("instruments").select("*").in_("id", instrument_ids).execute()
            instruments = {i["id"]: i for i in result.data}
        if user_ids:
            result = self.supabase.table("users").select("id, name, email").in_("id", user_ids).execute()
            users = {u["id"]: u for u in result.data}
        return [
            AssignmentResponse(**r, instrument=instruments.get(r["instrument_id"]), user=users.get(r["user_id"]))
            for r in rows
        ]

    def list_assignments(self, user_id: Optional[str] = None) -> List[AssignmentResponse]:
        """All assignments, or only `user_id`'s, newest invitation first."""
        try:
            query = self.supabase.table("assignments").select("*")
            if user_id:
                query = query.eq("user_id", user_id)
            result = query.order("invited_at", desc=True).execute()
            return self._with_details(result.data)
        except Exception as e:
            logger.error(f"Error listing assignments: {e}")
            raise InternalError("Could not list assignments")

    def list_for_set(self, set_id: str) -> List[AssignmentResponse]:
        try:
            result = self.supabase.table("assignments")\
                .select("*")\
                .eq("set_id", set_id)\
                .order("invited_at")\
                .execute()
            return self._with_details(result.data)
        except Exception as e:
            logger.error(f"Error listing assignments for set {set_id}: {e}")
            raise InternalError("Could not list assignments")

    def get_assignment(self, assignment_id: str) -> AssignmentResponse:
        try:
            row = fetch_one(self.supabase, "assignments", assignment_id)
            if not row:
                raise NotFoundError("Assignment not found")
            return self._with_details([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching assignment {assignment_id}: {e}")
            raise InternalError("Could not fetch assignment")

    def create_assignment(self, data: AssignmentCreate) -> AssignmentResponse:
        """Invite a user to an instrument, within the instrument's per-set limit."""
        try:
            instrument = fetch_one(self.supabase, "instruments", data.instrument_id)
            if not instrument:
                raise NotFoundError("Instrument not found")
            if not fetch_one(self.supabase, "users", data.user_id, "id"):
                raise NotFoundError("User not found")

            existing = self.supabase.table("assignments")\
                .select("id, user_id")\
                .eq("set_id", data.set_id)\
                .eq("instrument_id", data.instrument_id)\
                .execute()
            if any(row["user_id"] == data.user_id for row in existing.data):
                raise ConflictError(DUPLICATE_MESSAGE)
            if len(existing.data) >= instrument["max_per_set"]:
                raise CapacityError(
                    f"Maximum {instrument['max_per_set']} {instrument['display_name']}(s) allowed per worship set"
                )

            result = self.supabase.table("assignments").insert({
                "set_id": data.set_id,
                "instrument_id": data.instrument_id,
                "user_id": data.user_id,
                "status": AssignmentStatus.INVITED.value,
                "invited_at": _now(),
            }).execute()
            if not result.data:
                raise InternalError("Could not create assignment")
            return self._with_details(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error creating assignment: {e}")
            raise InternalError("Could not create assignment")

    def respond(self, assignment_id: str, status: AssignmentStatus) -> AssignmentResponse:
        """Move an invitation to accepted or declined; any other transition is forbidden."""
        try:
            row = fetch_one(self.supabase, "assignments", assignment_id)
            if not row:
                raise NotFoundError("Assignment not found")
            allowed = RESPONSE_TRANSITIONS.get(AssignmentStatus(row["status"]), set())
            if status not in allowed:
                raise ForbiddenError(f"Cannot change assignment from {row['status']} to {status.value}")
            result = self.supabase.table("assignments")\
                .update({"status": status.value, "responded_at": _now()})\
                .eq("id", assignment_id)\
                .execute()
            logger.info(f"Assignment {assignment_id} {status.value}")
            return self._with_details(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error responding to assignment {assignment_id}: {e}")
            raise InternalError("Could not update assignment")

    def delete_assignment(self, assignment_id: str) -> None:
        try:
            result = self.supabase.table("assignments").delete().eq("id", assignment_id).execute()
            if not result.data:
                raise NotFoundError("Assignment not found")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting assignment {assignment_id}: {e}")
            raise InternalError("Could not delete assignment")

    def replace_for_set(self, set_id: str, data: AssignmentsUpsert) -> List[AssignmentResponse]:
        """Bulk replace per instrument: clear the instrument, then invite the given user.

        Instruments missing from the map are left alone. Concurrent edits are
        not reconciled; the last request wins.
        """
        try:
            instrument_ids = list(data.assignments)
            if instrument_ids:
                known = self.supabase.table("instruments").select("id").in_("id", instrument_ids).execute()
                missing = set(instrument_ids) - {i["id"] for i in known.data}
                if missing:
                    raise NotFoundError("Instrument not found")
            user_ids = list({u.strip() for u in data.assignments.values() if u and u.strip()})
            if user_ids:
                known = self.supabase.table("users").select("id").in_("id", user_ids).execute()
                if set(user_ids) - {u["id"] for u in known.data}:
                    raise NotFoundError("User not found")
            for instrument_id, user_id in data.assignments.items():
                self.supabase.table("assignments")\
                    .delete()\
                    .eq("set_id", set_id)\
                    .eq("instrument_id", instrument_id)\
                    .execute()
                if user_id and user_id.strip():
                    self.supabase.table("assignments").insert({
                        "set_id": set_id,
                        "instrument_id": instrument_id,
                        "user_id": user_id.strip(),
                        "status": AssignmentStatus.INVITED.value,
                        "invited_at": _now(),
                    }).execute()
            logger.info(f"Replaced assignments for {len(instrument_ids)} instruments in set {set_id}")
            return self.list_for_set(set_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error replacing assignments for set {set_id}: {e}")
            raise InternalError("Could not update service assignments")

    def copy_defaults(self, set_id: str, service_type_id: str) -> int:
        """Invite the service type's default players to a new worship set."""
        defaults = self.supabase.table("default_assignments")\
            .select("instrument_id, user_id")\
            .eq("service_type_id", service_type_id)\
            .execute()
        if not defaults.data:
            return 0
        invited_at = _now()
        self.supabase.table("assignments").insert([
            {
                "set_id": set_id,
                "instrument_id": d["instrument_id"],
                "user_id": d["user_id"],
                "status": AssignmentStatus.INVITED.value,
                "invited_at": invited_at,
            }
            for d in defaults.data
        ]).execute()
        return len(defaults.data)
