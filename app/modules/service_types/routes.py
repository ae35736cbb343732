from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.service_types.schemas import ServiceTypeCreate, ServiceTypeUpdate, ServiceTypeResponse
from app.modules.service_types.service import ServiceTypeService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/service-types", tags=["service-types"])


def get_service_type_service(supabase: Client = Depends(get_supabase)) -> ServiceTypeService:
    return ServiceTypeService(supabase)


@router.get("", response_model=DataResponse[List[ServiceTypeResponse]])
async def list_service_types(
    user_data: Dict = Depends(require_permission("service_types:read")),
    service: ServiceTypeService = Depends(get_service_type_service)
):
    return {"data": service.list_service_types()}


@router.get("/{service_type_id}", response_model=DataResponse[ServiceTypeResponse])
async def get_service_type(
    service_type_id: UuidPath,
    user_data: Dict = Depends(require_permission("service_types:read")),
    service: ServiceTypeService = Depends(get_service_type_service)
):
    return {"data": service.get_service_type(service_type_id)}


@router.post("", response_model=DataResponse[ServiceTypeResponse], status_code=201)
async def create_service_type(
    data: ServiceTypeCreate,
    user_data: Dict = Depends(require_permission("service_types:create")),
    service: ServiceTypeService = Depends(get_service_type_service)
):
    return {"data": service.create_service_type(data)}


@router.put("/{service_type_id}", response_model=DataResponse[ServiceTypeResponse])
async def update_service_type(
    service_type_id: UuidPath,
    data: ServiceTypeUpdate,
    user_data: Dict = Depends(require_permission("service_types:update")),
    service: ServiceTypeService = Depends(get_service_type_service)
):
    return {"data": service.update_service_type(service_type_id, data)}


@router.delete("/{service_type_id}", response_model=DataResponse[MessageResponse])
async def delete_service_type(
    service_type_id: UuidPath,
    user_data: Dict = Depends(require_permission("service_types:delete")),
    service: ServiceTypeService = Depends(get_service_type_service)
):
    service.delete_service_type(service_type_id)
    return {"data": {"message": "Service type deleted"}}
