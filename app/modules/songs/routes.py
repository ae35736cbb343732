from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.songs.schemas import SongCreate, SongUpdate, SongResponse
from app.modules.songs.service import SongService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/songs", tags=["songs"])


def get_song_service(supabase: Client = Depends(get_supabase)) -> SongService:
    return SongService(supabase)


@router.get("", response_model=DataResponse[List[SongResponse]])
async def list_songs(
    user_data: Dict = Depends(require_permission("songs:read")),
    service: SongService = Depends(get_song_service)
):
    return {"data": service.list_songs()}


@router.get("/{song_id}", response_model=DataResponse[SongResponse])
async def get_song(
    song_id: UuidPath,
    user_data: Dict = Depends(require_permission("songs:read")),
    service: SongService = Depends(get_song_service)
):
    return {"data": service.get_song(song_id)}


@router.post("", response_model=DataResponse[SongResponse], status_code=201)
async def create_song(
    song_data: SongCreate,
    user_data: Dict = Depends(require_permission("songs:create")),
    service: SongService = Depends(get_song_service)
):
    """Add a song to the library (admin/leader)"""
    return {"data": service.create_song(song_data)}


@router.put("/{song_id}", response_model=DataResponse[SongResponse])
async def update_song(
    song_id: UuidPath,
    song_data: SongUpdate,
    user_data: Dict = Depends(require_permission("songs:update")),
    service: SongService = Depends(get_song_service)
):
    return {"data": service.update_song(song_id, song_data)}


@router.delete("/{song_id}", response_model=DataResponse[SongResponse])
async def delete_song(
    song_id: UuidPath,
    user_data: Dict = Depends(require_permission("songs:delete")),
    service: SongService = Depends(get_song_service)
):
    """Soft delete (admin)"""
    return {"data": service.delete_song(song_id)}
