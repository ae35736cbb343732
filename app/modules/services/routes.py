from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.services.schemas import ServiceCreate, ServiceUpdate, ServiceResponse, ServiceDetailResponse
from app.modules.services.service import ServiceService
from app.modules.assignments.schemas import AssignmentsUpsert, AssignmentResponse
from app.modules.assignments.service import AssignmentService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from datetime import datetime
from typing import List, Dict, Optional

router = APIRouter(prefix="/services", tags=["services"])


def get_service_service(supabase: Client = Depends(get_supabase)) -> ServiceService:
    return ServiceService(supabase)


def get_assignment_service(supabase: Client = Depends(get_supabase)) -> AssignmentService:
    return AssignmentService(supabase)


@router.get("", response_model=DataResponse[List[ServiceResponse]])
async def list_services(
    upcoming: bool = False,
    limit: Optional[int] = Query(None, ge=1, le=500),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    user_data: Dict = Depends(require_permission("services:read")),
    service: ServiceService = Depends(get_service_service)
):
    """List services by date. upcoming=true keeps services from today on."""
    return {"data": service.list_services(upcoming=upcoming, limit=limit, start_date=start_date, end_date=end_date)}


@router.get("/{service_id}", response_model=DataResponse[ServiceDetailResponse])
async def get_service(
    service_id: UuidPath,
    user_data: Dict = Depends(require_permission("services:read")),
    service: ServiceService = Depends(get_service_service)
):
    return {"data": service.get_service(service_id)}


@router.post("", response_model=DataResponse[ServiceResponse], status_code=201)
async def create_service(
    data: ServiceCreate,
    user_data: Dict = Depends(require_permission("services:create")),
    service: ServiceService = Depends(get_service_service)
):
    """Create a service; its draft worship set is created with it"""
    return {"data": service.create_service(data)}


@router.put("/{service_id}", response_model=DataResponse[ServiceResponse])
async def update_service(
    service_id: UuidPath,
    data: ServiceUpdate,
    user_data: Dict = Depends(require_permission("services:update")),
    service: ServiceService = Depends(get_service_service)
):
    return {"data": service.update_service(service_id, data)}


@router.delete("/{service_id}", response_model=DataResponse[MessageResponse])
async def delete_service(
    service_id: UuidPath,
    user_data: Dict = Depends(require_permission("services:delete")),
    service: ServiceService = Depends(get_service_service)
):
    """Delete a service and its worship set (admin)"""
    service.delete_service(service_id)
    return {"data": {"message": "Service deleted"}}


@router.get("/{service_id}/assignments", response_model=DataResponse[List[AssignmentResponse]])
async def get_service_assignments(
    service_id: UuidPath,
    user_data: Dict = Depends(require_permission("assignments:read")),
    service: ServiceService = Depends(get_service_service),
    assignments: AssignmentService = Depends(get_assignment_service)
):
    return {"data": assignments.list_for_set(service.get_worship_set_id(service_id))}


@router.put("/{service_id}/assignments", response_model=DataResponse[List[AssignmentResponse]])
async def update_service_assignments(
    service_id: UuidPath,
    data: AssignmentsUpsert,
    user_data: Dict = Depends(require_permission("services:update")),
    service: ServiceService = Depends(get_service_service),
    assignments: AssignmentService = Depends(get_assignment_service)
):
    """Replace the players of the given instruments (admin/leader)"""
    return {"data": assignments.replace_for_set(service.get_worship_set_id(service_id), data)}
