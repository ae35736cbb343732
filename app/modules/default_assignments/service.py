import logging
from supabase import Client
from app.modules.default_assignments.schemas import (
    DefaultAssignmentCreate, DefaultAssignmentUpdate, DefaultAssignmentResponse
)
from app.core.exceptions import NotFoundError, ConflictError, InternalError, is_unique_violation
from app.database.supabase_client import fetch_one
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A default assignment already exists for this service type and instrument"


class DefaultAssignmentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_default_assignments(self, service_type_id: Optional[str] = None) -> List[DefaultAssignmentResponse]:
        try:
            query = self.supabase.table("default_assignments").select("*")
            if service_type_id:
                query = query.eq("service_type_id", service_type_id)
            result = query.order("created_at").execute()
            return [DefaultAssignmentResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing default assignments: {e}")
            raise InternalError("Could not list default assignments")

    def get_default_assignment(self, assignment_id: str) -> DefaultAssignmentResponse:
        try:
            row = fetch_one(self.supabase, "default_assignments", assignment_id)
            if not row:
                raise NotFoundError("Default assignment not found")
            return DefaultAssignmentResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching default assignment {assignment_id}: {e}")
            raise InternalError("Could not fetch default assignment")

    def create_default_assignment(self, data: DefaultAssignmentCreate) -> DefaultAssignmentResponse:
        try:
            for table, row_id, label in (
                ("service_types", data.service_type_id, "Service type"),
                ("instruments", data.instrument_id, "Instrument"),
                ("users", data.user_id, "User"),
            ):
                if not fetch_one(self.supabase, table, row_id, "id"):
                    raise NotFoundError(f"{label} not found")
            existing = self.supabase.table("default_assignments")\
                .select("id")\
                .eq("service_type_id", data.service_type_id)\
                .eq("instrument_id", data.instrument_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise ConflictError(DUPLICATE_MESSAGE)
            result = self.supabase.table("default_assignments")\
                .insert(data.model_dump(mode="json"))\
                .execute()
            if not result.data:
                raise InternalError("Could not create default assignment")
            return DefaultAssignmentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error creating default assignment: {e}")
            raise InternalError("Could not create default assignment")

    def update_default_assignment(self, assignment_id: str, data: DefaultAssignmentUpdate) -> DefaultAssignmentResponse:
        """Change the user who plays this instrument by default."""
        try:
            if not fetch_one(self.supabase, "users", data.user_id, "id"):
                raise NotFoundError("User not found")
            result = self.supabase.table("default_assignments")\
                .update({"user_id": data.user_id})\
                .eq("id", assignment_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Default assignment not found")
            return DefaultAssignmentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating default assignment {assignment_id}: {e}")
            raise InternalError("Could not update default assignment")

    def delete_default_assignment(self, assignment_id: str) -> None:
        try:
            result = self.supabase.table("default_assignments")\
                .delete()\
                .eq("id", assignment_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Default assignment not found")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting default assignment {assignment_id}: {e}")
            raise InternalError("Could not delete default assignment")
