from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.leader_rotations.schemas import (
    LeaderRotationCreate, LeaderRotationUpdate, LeaderRotationReorder, LeaderRotationResponse
)
from app.modules.leader_rotations.service import LeaderRotationService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath, UUID_PATTERN
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/leader-rotations", tags=["leader-rotations"])


def get_leader_rotation_service(supabase: Client = Depends(get_supabase)) -> LeaderRotationService:
    return LeaderRotationService(supabase)


@router.get("", response_model=DataResponse[List[LeaderRotationResponse]])
async def list_rotations(
    service_type_id: Optional[str] = Query(None, alias="serviceTypeId", pattern=UUID_PATTERN),
    user_data: Dict = Depends(require_permission("leader_rotations:read")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.list_rotations(service_type_id)}


@router.put("/reorder", response_model=DataResponse[List[LeaderRotationResponse]])
async def reorder_rotations(
    data: LeaderRotationReorder,
    user_data: Dict = Depends(require_permission("leader_rotations:update")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.reorder(data)}


@router.get("/next/{service_type_id}", response_model=DataResponse[LeaderRotationResponse])
async def get_next_leader(
    service_type_id: UuidPath,
    user_data: Dict = Depends(require_permission("leader_rotations:read")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.next_leader(service_type_id)}


@router.get("/by-service-type/{service_type_id}", response_model=DataResponse[List[LeaderRotationResponse]])
async def list_rotations_by_service_type(
    service_type_id: UuidPath,
    user_data: Dict = Depends(require_permission("leader_rotations:read")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.list_rotations(service_type_id)}


@router.get("/{rotation_id}", response_model=DataResponse[LeaderRotationResponse])
async def get_rotation(
    rotation_id: UuidPath,
    user_data: Dict = Depends(require_permission("leader_rotations:read")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.get_rotation(rotation_id)}


@router.post("", response_model=DataResponse[LeaderRotationResponse], status_code=201)
async def create_rotation(
    data: LeaderRotationCreate,
    user_data: Dict = Depends(require_permission("leader_rotations:create")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    """Add a leader to a service type's rotation (admin)"""
    return {"data": service.create_rotation(data)}


@router.put("/{rotation_id}", response_model=DataResponse[LeaderRotationResponse])
async def update_rotation(
    rotation_id: UuidPath,
    data: LeaderRotationUpdate,
    user_data: Dict = Depends(require_permission("leader_rotations:update")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    return {"data": service.update_rotation(rotation_id, data)}


@router.delete("/{rotation_id}", response_model=DataResponse[MessageResponse])
async def delete_rotation(
    rotation_id: UuidPath,
    user_data: Dict = Depends(require_permission("leader_rotations:delete")),
    service: LeaderRotationService = Depends(get_leader_rotation_service)
):
    service.delete_rotation(rotation_id)
    return {"data": {"message": "Leader rotation deactivated"}}
