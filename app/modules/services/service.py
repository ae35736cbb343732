import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.services.schemas import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceDetailResponse
from app.modules.worship_sets.service import WorshipSetService
from app.core.exceptions import NotFoundError, ConflictError, InternalError, is_unique_violation
from app.database.supabase_client import fetch_one
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A service of this type already exists for the specified date"


class ServiceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _with_details(self, rows: List[dict]) -> List[ServiceResponse]:
        if not rows:
            return []
        type_ids = list({r["service_type_id"] for r in rows})
        types = {t["id"]: t for t in self.supabase.table("service_types").select("*").in_("id", type_ids).execute().data}
        sets = self.supabase.table("worship_sets")\
            .select("*")\
            .in_("service_id", [r["id"] for r in rows])\
            .execute().data
        set_by_service = {s["service_id"]: s for s in sets}
        user_ids = list(
            {r["leader_id"] for r in rows if r.get("leader_id")}
            | {s["leader_user_id"] for s in sets if s.get("leader_user_id")}
        )
        users: Dict[str, dict] = {}
        if user_ids:
            users = {u["id"]: u for u in self.supabase.table("users").select("id, name, email").in_("id", user_ids).execute().data}
        counts: Dict[str, int] = {}
        if sets:
            for song in self.supabase.table("set_songs").select("set_id").in_("set_id", [s["id"] for s in sets]).execute().data:
                counts[song["set_id"]] = counts.get(song["set_id"], 0) + 1

        responses = []
        for r in rows:
            worship_set = set_by_service.get(r["id"])
            if worship_set:
                worship_set = {
                    **worship_set,
                    "leader_user": users.get(worship_set.get("leader_user_id")),
                    "song_count": counts.get(worship_set["id"], 0),
                }
            responses.append(ServiceResponse(
                **r,
                service_type=types.get(r["service_type_id"]),
                leader=users.get(r.get("leader_id")),
                worship_set=worship_set,
            ))
        return responses

    def list_services(
        self,
        upcoming: bool = False,
        limit: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[ServiceResponse]:
        """Services by date; `upcoming` wins over an explicit date range."""
        try:
            query = self.supabase.table("services").select("*")
            if upcoming:
                today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
                query = query.gte("service_date", today.isoformat())
            else:
                if start_date:
                    query = query.gte("service_date", start_date.isoformat())
                if end_date:
                    query = query.lte("service_date", end_date.isoformat())
            query = query.order("service_date")
            if limit:
                query = query.limit(limit)
            return self._with_details(query.execute().data)
        except Exception as e:
            logger.error(f"Error listing services: {e}")
            raise InternalError("Could not list services")

    def get_service(self, service_id: str) -> ServiceDetailResponse:
        """A service with its worship set, set songs and assignments."""
        try:
            row = fetch_one(self.supabase, "services", service_id)
            if not row:
                raise NotFoundError("Service not found")
            summary = self._with_details([row])[0]
            detail = None
            if summary.worship_set:
                set_row = fetch_one(self.supabase, "worship_sets", summary.worship_set.id)
                detail = WorshipSetService(self.supabase).get_detail(set_row)
            return ServiceDetailResponse(**summary.model_dump(exclude={"worship_set"}), worship_set=detail)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching service {service_id}: {e}")
            raise InternalError("Could not fetch service")

    def _ensure_unique(self, service_type_id: str, service_date: str, exclude_id: Optional[str] = None) -> None:
        existing = self.supabase.table("services")\
            .select("id")\
            .eq("service_type_id", service_type_id)\
            .eq("service_date", service_date)\
            .execute().data
        if any(s["id"] != exclude_id for s in existing):
            raise ConflictError(DUPLICATE_MESSAGE)

    def create_service(self, data: ServiceCreate) -> ServiceResponse:
        """Create a service together with its draft worship set."""
        try:
            if not fetch_one(self.supabase, "service_types", data.service_type_id, "id"):
                raise NotFoundError("Service type not found")
            service_date = data.model_dump(mode="json")["date"]
            self._ensure_unique(data.service_type_id, service_date)
            record = {"service_type_id": data.service_type_id, "service_date": service_date}
            if data.leader_id:
                if not fetch_one(self.supabase, "users", data.leader_id, "id"):
                    raise NotFoundError("User not found")
                record["leader_id"] = data.leader_id

            result = self.supabase.table("services").insert(record).execute()
            if not result.data:
                raise InternalError("Could not create service")
            service = result.data[0]
            try:
                WorshipSetService(self.supabase).create_for_service(service, notes=data.notes)
            except Exception:
                # Leave no service without its worship set
                self.supabase.table("services").delete().eq("id", service["id"]).execute()
                raise
            logger.info(f"Created service {service['id']} on {service_date}")
            return self._with_details([service])[0]
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error creating service: {e}")
            raise InternalError("Could not create service")

    def update_service(self, service_id: str, data: ServiceUpdate) -> ServiceResponse:
        try:
            row = fetch_one(self.supabase, "services", service_id)
            if not row:
                raise NotFoundError("Service not found")
            fields = data.model_dump(mode="json", exclude_unset=True)
            update_data = {}
            if fields.get("date"):
                update_data["service_date"] = fields["date"]
            if fields.get("service_type_id"):
                if not fetch_one(self.supabase, "service_types", fields["service_type_id"], "id"):
                    raise NotFoundError("Service type not found")
                update_data["service_type_id"] = fields["service_type_id"]
            if fields.get("status"):
                update_data["status"] = fields["status"]
            if "leader_id" in fields:
                update_data["leader_id"] = fields["leader_id"] or None

            if "service_date" in update_data or "service_type_id" in update_data:
                self._ensure_unique(
                    update_data.get("service_type_id", row["service_type_id"]),
                    update_data.get("service_date", row["service_date"]),
                    exclude_id=service_id,
                )
            if update_data:
                result = self.supabase.table("services").update(update_data).eq("id", service_id).execute()
                row = result.data[0]

            # Manual override of the set leader; the rotation is left alone
            if "worship_set_leader_id" in fields:
                self.supabase.table("worship_sets")\
                    .update({"leader_user_id": fields["worship_set_leader_id"] or None})\
                    .eq("service_id", service_id)\
                    .execute()
            return self._with_details([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_MESSAGE)
            logger.error(f"Error updating service {service_id}: {e}")
            raise InternalError("Could not update service")

    def delete_service(self, service_id: str) -> None:
        try:
            if not fetch_one(self.supabase, "services", service_id, "id"):
                raise NotFoundError("Service not found")
            sets = self.supabase.table("worship_sets").select("id").eq("service_id", service_id).execute().data
            worship_sets = WorshipSetService(self.supabase)
            for worship_set in sets:
                worship_sets.delete_cascade(worship_set["id"])
            self.supabase.table("services").delete().eq("id", service_id).execute()
            logger.info(f"Deleted service {service_id}")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting service {service_id}: {e}")
            raise InternalError("Could not delete service")

    def get_worship_set_id(self, service_id: str) -> str:
        if not fetch_one(self.supabase, "services", service_id, "id"):
            raise NotFoundError("Service not found")
        sets = self.supabase.table("worship_sets").select("id").eq("service_id", service_id).limit(1).execute().data
        if not sets:
            raise NotFoundError("Service does not have a worship set")
        return sets[0]["id"]
