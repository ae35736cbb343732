from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.default_assignments.schemas import (
    DefaultAssignmentCreate, DefaultAssignmentUpdate, DefaultAssignmentResponse
)
from app.modules.default_assignments.service import DefaultAssignmentService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath, UUID_PATTERN
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/default-assignments", tags=["default-assignments"])


def get_default_assignment_service(supabase: Client = Depends(get_supabase)) -> DefaultAssignmentService:
    return DefaultAssignmentService(supabase)


@router.get("", response_model=DataResponse[List[DefaultAssignmentResponse]])
async def list_default_assignments(
    service_type_id: Optional[str] = Query(None, alias="serviceTypeId", pattern=UUID_PATTERN),
    user_data: Dict = Depends(require_permission("default_assignments:read")),
    service: DefaultAssignmentService = Depends(get_default_assignment_service)
):
    return {"data": service.list_default_assignments(service_type_id)}


@router.get("/{assignment_id}", response_model=DataResponse[DefaultAssignmentResponse])
async def get_default_assignment(
    assignment_id: UuidPath,
    user_data: Dict = Depends(require_permission("default_assignments:read")),
    service: DefaultAssignmentService = Depends(get_default_assignment_service)
):
    return {"data": service.get_default_assignment(assignment_id)}


@router.post("", response_model=DataResponse[DefaultAssignmentResponse], status_code=201)
async def create_default_assignment(
    data: DefaultAssignmentCreate,
    user_data: Dict = Depends(require_permission("default_assignments:create")),
    service: DefaultAssignmentService = Depends(get_default_assignment_service)
):
    return {"data": service.create_default_assignment(data)}


@router.put("/{assignment_id}", response_model=DataResponse[DefaultAssignmentResponse])
async def update_default_assignment(
    assignment_id: UuidPath,
    data: DefaultAssignmentUpdate,
    user_data: Dict = Depends(require_permission("default_assignments:update")),
    service: DefaultAssignmentService = Depends(get_default_assignment_service)
):
    return {"data": service.update_default_assignment(assignment_id, data)}


@router.delete("/{assignment_id}", response_model=DataResponse[MessageResponse])
async def delete_default_assignment(
    assignment_id: UuidPath,
    user_data: Dict = Depends(require_permission("default_assignments:delete")),
    service: DefaultAssignmentService = Depends(get_default_assignment_service)
):
    service.delete_default_assignment(assignment_id)
    return {"data": {"message": "Default assignment deleted"}}
