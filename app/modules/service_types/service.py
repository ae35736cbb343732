import logging
from supabase import Client
from app.modules.service_types.schemas import ServiceTypeCreate, ServiceTypeUpdate, ServiceTypeResponse
from app.core.exceptions import (
    NotFoundError, ConflictError, ValidationError, InternalError,
    is_unique_violation, is_foreign_key_violation
)
from app.database.supabase_client import fetch_one
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class ServiceTypeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_service_types(self) -> List[ServiceTypeResponse]:
        try:
            result = self.supabase.table("service_types").select("*").order("name").execute()
            return [ServiceTypeResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing service types: {e}")
            raise InternalError()

    def get_service_type(self, service_type_id: str) -> ServiceTypeResponse:
        try:
            row = fetch_one(self.supabase, "service_types", service_type_id)
            if not row:
                raise NotFoundError("Service type not found")
            return ServiceTypeResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching service type {service_type_id}: {e}")
            raise InternalError()

    def create_service_type(self, data: ServiceTypeCreate) -> ServiceTypeResponse:
        try:
            result = self.supabase.table("service_types")\
                .insert(data.model_dump(mode="json", exclude_none=True))\
                .execute()
            if not result.data:
                raise InternalError("Could not create service type")
            return ServiceTypeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("A service type with this name already exists")
            logger.error(f"Error creating service type: {e}")
            raise InternalError("Could not create service type")

    def update_service_type(self, service_type_id: str, data: ServiceTypeUpdate) -> ServiceTypeResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self.get_service_type(service_type_id)
            result = self.supabase.table("service_types")\
                .update(update_data)\
                .eq("id", service_type_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Service type not found")
            return ServiceTypeResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise ConflictError("A service type with this name already exists")
            logger.error(f"Error updating service type {service_type_id}: {e}")
            raise InternalError("Could not update service type")

    def delete_service_type(self, service_type_id: str) -> None:
        try:
            if not fetch_one(self.supabase, "service_types", service_type_id, "id"):
                raise NotFoundError("Service type not found")
            in_use = self.supabase.table("services")\
                .select("id")\
                .eq("service_type_id", service_type_id)\
                .limit(1)\
                .execute()
            if in_use.data:
                raise ValidationError("Cannot delete a service type that has services")
            self.supabase.table("service_types").delete().eq("id", service_type_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_foreign_key_violation(e):
                raise ValidationError("Cannot delete a service type that is still referenced")
            logger.error(f"Error deleting service type {service_type_id}: {e}")
            raise InternalError("Could not delete service type")
