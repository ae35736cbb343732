from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.set_songs.schemas import SetSongCreate, SetSongUpdate, SetSongReorder, SetSongResponse
from app.modules.set_songs.service import SetSongService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/set-songs", tags=["set-songs"])


def get_set_song_service(supabase: Client = Depends(get_supabase)) -> SetSongService:
    return SetSongService(supabase)


@router.get("/set/{set_id}", response_model=DataResponse[List[SetSongResponse]])
async def list_set_songs(
    set_id: UuidPath,
    user_data: Dict = Depends(require_permission("set_songs:read")),
    service: SetSongService = Depends(get_set_song_service)
):
    """Songs of a worship set in position order"""
    return {"data": service.list_for_set(set_id)}


@router.put("/set/{set_id}/reorder", response_model=DataResponse[List[SetSongResponse]])
async def reorder_set_songs(
    set_id: UuidPath,
    data: SetSongReorder,
    user_data: Dict = Depends(require_permission("set_songs:update")),
    service: SetSongService = Depends(get_set_song_service)
):
    return {"data": service.reorder(set_id, data)}


@router.get("/{set_song_id}", response_model=DataResponse[SetSongResponse])
async def get_set_song(
    set_song_id: UuidPath,
    user_data: Dict = Depends(require_permission("set_songs:read")),
    service: SetSongService = Depends(get_set_song_service)
):
    return {"data": service.get_set_song(set_song_id)}


@router.post("", response_model=DataResponse[SetSongResponse], status_code=201)
async def create_set_song(
    data: SetSongCreate,
    user_data: Dict = Depends(require_permission("set_songs:create")),
    service: SetSongService = Depends(get_set_song_service)
):
    return {"data": service.create_set_song(data)}


@router.put("/{set_song_id}", response_model=DataResponse[SetSongResponse])
async def update_set_song(
    set_song_id: UuidPath,
    data: SetSongUpdate,
    user_data: Dict = Depends(require_permission("set_songs:update")),
    service: SetSongService = Depends(get_set_song_service)
):
    return {"data": service.update_set_song(set_song_id, data)}


@router.delete("/{set_song_id}", response_model=DataResponse[MessageResponse])
async def delete_set_song(
    set_song_id: UuidPath,
    user_data: Dict = Depends(require_permission("set_songs:delete")),
    service: SetSongService = Depends(get_set_song_service)
):
    service.delete_set_song(set_song_id)
    return {"data": {"message": "Set song deleted"}}
