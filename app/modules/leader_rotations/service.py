import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.leader_rotations.schemas import (
    LeaderRotationCreate, LeaderRotationUpdate, LeaderRotationReorder, LeaderRotationResponse
)
from app.modules.users.models import Role
from app.core.exceptions import NotFoundError, ValidationError, ConflictError, InternalError, is_unique_violation
from app.database.supabase_client import fetch_one
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_ORDER_MESSAGE = "Rotation order already exists for this service type"


class LeaderRotationService:
    """Round-robin worship leader rotation per service type.

    Every change to a service type's rotation reassigns the leaders of that
    type's future worship sets in rotation order.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _attach_users(self, rows: List[dict]) -> List[LeaderRotationResponse]:
        user_ids = list({r["user_id"] for r in rows})
        users: Dict[str, dict] = {}
        if user_ids:
            result = self.supabase.table("users")\
                .select("id, name, email, roles")\
                .in_("id", user_ids)\
                .execute()
            users = {u["id"]: u for u in result.data}
        return [LeaderRotationResponse(**r, user=users.get(r["user_id"])) for r in rows]

    def _active_rotations(self, service_type_id: str) -> List[dict]:
        result = self.supabase.table("leader_rotations")\
            .select("*")\
            .eq("service_type_id", service_type_id)\
            .eq("is_active", True)\
            .order("rotation_order")\
            .execute()
        return result.data

    def list_rotations(self, service_type_id: Optional[str] = None) -> List[LeaderRotationResponse]:
        try:
            query = self.supabase.table("leader_rotations").select("*").eq("is_active", True)
            if service_type_id:
                query = query.eq("service_type_id", service_type_id)
            result = query.order("service_type_id").order("rotation_order").execute()
            return self._attach_users(result.data)
        except Exception as e:
            logger.error(f"Error listing leader rotations: {e}")
            raise InternalError("Could not list leader rotations")

    def get_rotation(self, rotation_id: str) -> LeaderRotationResponse:
        try:
            row = fetch_one(self.supabase, "leader_rotations", rotation_id)
            if not row:
                raise NotFoundError("Leader rotation not found")
            return self._attach_users([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching leader rotation {rotation_id}: {e}")
            raise InternalError("Could not fetch leader rotation")

    def create_rotation(self, data: LeaderRotationCreate) -> LeaderRotationResponse:
        try:
            user = fetch_one(self.supabase, "users", data.user_id, "id, roles")
            if not user or Role.LEADER.value not in (user.get("roles") or []):
                raise ValidationError("User must have leader role to be added to rotation")
            if not fetch_one(self.supabase, "service_types", data.service_type_id, "id"):
                raise NotFoundError("Service type not found")
            taken = self.supabase.table("leader_rotations")\
                .select("id")\
                .eq("service_type_id", data.service_type_id)\
                .eq("rotation_order", data.rotation_order)\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
            if taken.data:
                raise ConflictError(DUPLICATE_ORDER_MESSAGE)
            result = self.supabase.table("leader_rotations")\
                .insert(data.model_dump(mode="json"))\
                .execute()
            if not result.data:
                raise InternalError("Could not create leader rotation")
            self.recalculate_leaders(data.service_type_id)
            return self._attach_users(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_ORDER_MESSAGE)
            logger.error(f"Error creating leader rotation: {e}")
            raise InternalError("Could not create leader rotation")

    def update_rotation(self, rotation_id: str, data: LeaderRotationUpdate) -> LeaderRotationResponse:
        try:
            row = fetch_one(self.supabase, "leader_rotations", rotation_id)
            if not row:
                raise NotFoundError("Leader rotation not found")
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if update_data:
                self.supabase.table("leader_rotations").update(update_data).eq("id", rotation_id).execute()
                self.recalculate_leaders(row["service_type_id"])
            return self.get_rotation(rotation_id)
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_ORDER_MESSAGE)
            logger.error(f"Error updating leader rotation {rotation_id}: {e}")
            raise InternalError("Could not update leader rotation")

    def delete_rotation(self, rotation_id: str) -> None:
        """Soft delete: the entry is deactivated and drops out of the rotation."""
        try:
            result = self.supabase.table("leader_rotations")\
                .update({"is_active": False})\
                .eq("id", rotation_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Leader rotation not found")
            self.recalculate_leaders(result.data[0]["service_type_id"])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting leader rotation {rotation_id}: {e}")
            raise InternalError("Could not delete leader rotation")

    def reorder(self, data: LeaderRotationReorder) -> List[LeaderRotationResponse]:
        try:
            active = {r["id"] for r in self._active_rotations(data.service_type_id)}
            if set(data.rotation_ids) != active:
                raise ValidationError("rotationIds must list every active rotation of the service type")
            # Park entries past the current range first so orders never collide
            offset = len(active) + 1
            for index, rotation_id in enumerate(data.rotation_ids):
                self.supabase.table("leader_rotations")\
                    .update({"rotation_order": offset + index})\
                    .eq("id", rotation_id)\
                    .execute()
            for index, rotation_id in enumerate(data.rotation_ids, start=1):
                self.supabase.table("leader_rotations")\
                    .update({"rotation_order": index})\
                    .eq("id", rotation_id)\
                    .execute()
            self.recalculate_leaders(data.service_type_id)
            return self.list_rotations(data.service_type_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error reordering leader rotations: {e}")
            raise InternalError("Could not reorder leader rotations")

    def next_leader(self, service_type_id: str) -> LeaderRotationResponse:
        """The rotation entry after the leader of the latest led service of this type."""
        try:
            rotations = self._active_rotations(service_type_id)
            if not rotations:
                raise NotFoundError("No active leader rotation found for this service type")

            services = self.supabase.table("services")\
                .select("id")\
                .eq("service_type_id", service_type_id)\
                .order("service_date", desc=True)\
                .execute()
            last_leader_id = None
            service_ids = [s["id"] for s in services.data]
            if service_ids:
                sets = self.supabase.table("worship_sets")\
                    .select("service_id, leader_user_id")\
                    .in_("service_id", service_ids)\
                    .execute()
                leader_by_service = {s["service_id"]: s.get("leader_user_id") for s in sets.data}
                for service_id in service_ids:
                    if leader_by_service.get(service_id):
                        last_leader_id = leader_by_service[service_id]
                        break

            order = [r["user_id"] for r in rotations]
            if last_leader_id in order:
                chosen = rotations[(order.index(last_leader_id) + 1) % len(rotations)]
            else:
                chosen = rotations[0]
            return self._attach_users([chosen])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error determining next leader for {service_type_id}: {e}")
            raise InternalError("Could not determine next leader")

    def recalculate_leaders(self, service_type_id: str) -> int:
        """Reassign leaders of future worship sets round-robin; returns sets touched."""
        rotations = self._active_rotations(service_type_id)
        today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        services = self.supabase.table("services")\
            .select("id")\
            .eq("service_type_id", service_type_id)\
            .gte("service_date", today.isoformat())\
            .order("service_date")\
            .execute()
        service_ids = [s["id"] for s in services.data]
        if not service_ids:
            return 0
        sets = self.supabase.table("worship_sets")\
            .select("id, service_id")\
            .in_("service_id", service_ids)\
            .execute()
        set_by_service = {s["service_id"]: s["id"] for s in sets.data}

        touched = 0
        for index, service_id in enumerate(service_ids):
            set_id = set_by_service.get(service_id)
            if not set_id:
                continue
            leader_id = rotations[index % len(rotations)]["user_id"] if rotations else None
            self.supabase.table("worship_sets")\
                .update({"leader_user_id": leader_id})\
                .eq("id", set_id)\
                .execute()
            touched += 1
        logger.info(f"Recalculated leaders for {touched} future worship sets of service type {service_type_id}")
        return touched
