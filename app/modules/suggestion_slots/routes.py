from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.suggestion_slots.schemas import (
    SuggestionSlotCreate, SuggestionSlotUpdate, SlotAssignUser,
    SuggestionSlotResponse, MySuggestionSlotResponse
)
from app.modules.suggestion_slots.service import SuggestionSlotService
from app.core.dependencies import require_permission, get_current_user
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/suggestion-slots", tags=["suggestion-slots"])


def get_slot_service(supabase: Client = Depends(get_supabase)) -> SuggestionSlotService:
    return SuggestionSlotService(supabase)


@router.get("", response_model=DataResponse[List[SuggestionSlotResponse]])
async def list_slots(
    user_data: Dict = Depends(require_permission("suggestion_slots:read")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    return {"data": service.list_slots()}


@router.get("/my-assignments", response_model=DataResponse[List[MySuggestionSlotResponse]])
async def my_assignments(
    user_data: Dict = Depends(get_current_user),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    """Slots assigned to the caller, with overdue flags and suggestion counts"""
    return {"data": service.my_slots(user_data["id"])}


@router.get("/set/{set_id}", response_model=DataResponse[List[SuggestionSlotResponse]])
async def list_slots_for_set(
    set_id: UuidPath,
    user_data: Dict = Depends(require_permission("suggestion_slots:read")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    return {"data": service.list_for_set(set_id)}


@router.get("/{slot_id}", response_model=DataResponse[SuggestionSlotResponse])
async def get_slot(
    slot_id: UuidPath,
    user_data: Dict = Depends(require_permission("suggestion_slots:read")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    return {"data": service.get_slot(slot_id)}


@router.post("", response_model=DataResponse[SuggestionSlotResponse], status_code=201)
async def create_slot(
    data: SuggestionSlotCreate,
    user_data: Dict = Depends(require_permission("suggestion_slots:create")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    """Ask a user to suggest between minSongs and maxSongs songs by dueAt (admin/leader)"""
    return {"data": service.create_slot(data)}


@router.put("/{slot_id}/assign-user", response_model=DataResponse[SuggestionSlotResponse])
async def assign_user(
    slot_id: UuidPath,
    data: SlotAssignUser,
    user_data: Dict = Depends(require_permission("suggestion_slots:assign")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    return {"data": service.reassign(slot_id, data.assigned_user_id)}


@router.put("/{slot_id}", response_model=DataResponse[SuggestionSlotResponse])
async def update_slot(
    slot_id: UuidPath,
    data: SuggestionSlotUpdate,
    user_data: Dict = Depends(require_permission("suggestion_slots:update")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    return {"data": service.update_slot(slot_id, data)}


@router.delete("/{slot_id}", response_model=DataResponse[MessageResponse])
async def delete_slot(
    slot_id: UuidPath,
    user_data: Dict = Depends(require_permission("suggestion_slots:delete")),
    service: SuggestionSlotService = Depends(get_slot_service)
):
    """Delete a slot together with its suggestions"""
    service.delete_slot(slot_id)
    return {"data": {"message": "Suggestion slot deleted"}}
