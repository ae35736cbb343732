from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.worship_sets.schemas import (
    WorshipSetCreate, WorshipSetUpdate, AssignLeaderRequest,
    WorshipSetResponse, WorshipSetDetailResponse
)
from app.modules.worship_sets.service import WorshipSetService
from app.modules.leader_rotations.schemas import LeaderRotationResponse
from app.core.dependencies import require_permission, require_worship_set_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/worship-sets", tags=["worship-sets"])


def get_worship_set_service(supabase: Client = Depends(get_supabase)) -> WorshipSetService:
    return WorshipSetService(supabase)


@router.get("", response_model=DataResponse[List[WorshipSetResponse]])
async def list_worship_sets(
    user_data: Dict = Depends(require_permission("worship_sets:read")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    return {"data": service.list_sets()}


@router.get("/{service_id}", response_model=DataResponse[WorshipSetDetailResponse])
async def get_worship_set_for_service(
    service_id: UuidPath,
    user_data: Dict = Depends(require_permission("worship_sets:read")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    """Worship set of a service, with songs, slots and assignments"""
    return {"data": service.get_for_service(service_id)}


@router.post("", response_model=DataResponse[WorshipSetDetailResponse], status_code=201)
async def create_worship_set(
    data: WorshipSetCreate,
    user_data: Dict = Depends(require_permission("worship_sets:create")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    """Create a worship set; default assignments of the service type are copied in"""
    return {"data": service.create_set(data)}


@router.put("/{set_id}", response_model=DataResponse[WorshipSetResponse])
async def update_worship_set(
    set_id: UuidPath,
    data: WorshipSetUpdate,
    user_data: Dict = Depends(require_worship_set_permission("worship_sets:update")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    """Update status, due date or notes (admin or the set leader)"""
    return {"data": service.update_set(set_id, data)}


@router.post("/{set_id}/publish", response_model=DataResponse[WorshipSetResponse])
async def publish_worship_set(
    set_id: UuidPath,
    user_data: Dict = Depends(require_worship_set_permission("worship_sets:update")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    return {"data": service.publish(set_id)}


@router.delete("/{set_id}", response_model=DataResponse[MessageResponse])
async def delete_worship_set(
    set_id: UuidPath,
    user_data: Dict = Depends(require_permission("worship_sets:delete")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    service.delete_set(set_id)
    return {"data": {"message": "Worship set deleted"}}


@router.put("/{set_id}/assign-leader", response_model=DataResponse[WorshipSetResponse])
async def assign_leader(
    set_id: UuidPath,
    data: AssignLeaderRequest,
    user_data: Dict = Depends(require_permission("worship_sets:assign_leader")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    return {"data": service.assign_leader(set_id, data.leader_user_id)}


@router.get("/{set_id}/suggested-leader", response_model=DataResponse[LeaderRotationResponse])
async def get_suggested_leader(
    set_id: UuidPath,
    user_data: Dict = Depends(require_permission("worship_sets:read")),
    service: WorshipSetService = Depends(get_worship_set_service)
):
    """Next leader in the service type's rotation"""
    return {"data": service.suggested_leader(set_id)}
