from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, fetch_one
from app.modules.suggestions.schemas import (
    SuggestionCreate, SuggestionUpdate, SuggestionApprove,
    SuggestionResponse, SetSuggestionResponse
)
from app.modules.suggestions.service import SuggestionService
from app.modules.set_songs.schemas import SetSongResponse
from app.core.dependencies import get_current_user, authorize, has_permission, is_worship_set_leader
from app.core.exceptions import NotFoundError, AuthorizationError
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


def get_suggestion_service(supabase: Client = Depends(get_supabase)) -> SuggestionService:
    return SuggestionService(supabase)


def _authorize_set_leader_action(supabase: Client, user_data: Dict, slot: Dict, permission: str) -> None:
    """Approve/reject: admin or leader role, or the leader of the slot's worship set."""
    is_leader = is_worship_set_leader(supabase, slot["set_id"], user_data["id"])
    authorize(user_data, permission, is_owner=is_leader)


@router.post("", response_model=DataResponse[SuggestionResponse], status_code=201)
async def submit_suggestion(
    data: SuggestionCreate,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service)
):
    """Suggest a song for a slot (the slot's assigned user only)"""
    slot = service.get_slot_row(data.slot_id)
    authorize(
        user_data, "suggestions:submit", is_owner=slot["assigned_user_id"] == user_data["id"],
        message="Only the assigned user can submit suggestions for this slot"
    )
    return {"data": service.submit(slot, data)}


@router.get("/slot/{slot_id}", response_model=DataResponse[List[SuggestionResponse]])
async def list_suggestions_for_slot(
    slot_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service)
):
    slot = service.get_slot_row(slot_id)
    authorize(user_data, "suggestions:read", is_owner=slot["assigned_user_id"] == user_data["id"])
    return {"data": service.list_for_slot(slot_id)}


@router.get("/set/{set_id}", response_model=DataResponse[List[SetSuggestionResponse]])
async def list_suggestions_for_set(
    set_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
    supabase: Client = Depends(get_supabase)
):
    """All suggestions of a worship set, for its leaders and the people playing or suggesting in it"""
    worship_set = fetch_one(supabase, "worship_sets", set_id, "id, leader_user_id")
    if not worship_set:
        raise NotFoundError("Worship set not found")
    if not has_permission(user_data, "suggestions:read"):
        involved = is_worship_set_leader(supabase, set_id, user_data["id"], worship_set)
        for table, column in (("assignments", "user_id"), ("suggestion_slots", "assigned_user_id")):
            if involved:
                break
            involved = bool(
                supabase.table(table).select("id").eq("set_id", set_id).eq(column, user_data["id"]).limit(1).execute().data
            )
        if not involved:
            raise AuthorizationError("You are not part of this worship set")
    return {"data": service.list_for_set(set_id)}


@router.get("/{suggestion_id}", response_model=DataResponse[SuggestionResponse])
async def get_suggestion(
    suggestion_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service)
):
    suggestion = service.get_row(suggestion_id)
    slot = service.get_slot_row(suggestion["slot_id"])
    authorize(user_data, "suggestions:read", is_owner=slot["assigned_user_id"] == user_data["id"])
    return {"data": service.get_suggestion(suggestion_id)}


@router.put("/{suggestion_id}", response_model=DataResponse[SuggestionResponse])
async def update_suggestion(
    suggestion_id: UuidPath,
    data: SuggestionUpdate,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service)
):
    """Edit notes or the YouTube override (assigned user or admin)"""
    suggestion = service.get_row(suggestion_id)
    slot = service.get_slot_row(suggestion["slot_id"])
    authorize(user_data, "suggestions:update", is_owner=slot["assigned_user_id"] == user_data["id"])
    return {"data": service.update_suggestion(suggestion_id, data)}


@router.delete("/{suggestion_id}", response_model=DataResponse[MessageResponse])
async def delete_suggestion(
    suggestion_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service)
):
    suggestion = service.get_row(suggestion_id)
    slot = service.get_slot_row(suggestion["slot_id"])
    authorize(user_data, "suggestions:delete", is_owner=slot["assigned_user_id"] == user_data["id"])
    service.delete_suggestion(suggestion_id)
    return {"data": {"message": "Suggestion deleted"}}


@router.put("/{suggestion_id}/approve", response_model=DataResponse[SetSongResponse])
async def approve_suggestion(
    suggestion_id: UuidPath,
    data: SuggestionApprove,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
    supabase: Client = Depends(get_supabase)
):
    """Approve into the worship set as the next set song"""
    suggestion = service.get_row(suggestion_id)
    slot = service.get_slot_row(suggestion["slot_id"])
    _authorize_set_leader_action(supabase, user_data, slot, "suggestions:approve")
    return {"data": service.approve(suggestion, slot, data.song_version_id)}


@router.put("/{suggestion_id}/reject", response_model=DataResponse[MessageResponse])
async def reject_suggestion(
    suggestion_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: SuggestionService = Depends(get_suggestion_service),
    supabase: Client = Depends(get_supabase)
):
    """Reject (delete) a suggestion"""
    suggestion = service.get_row(suggestion_id)
    slot = service.get_slot_row(suggestion["slot_id"])
    _authorize_set_leader_action(supabase, user_data, slot, "suggestions:reject")
    service.reject(suggestion_id)
    return {"data": {"message": "Suggestion rejected"}}
