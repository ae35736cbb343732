from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.song_versions.schemas import SongVersionCreate, SongVersionUpdate, SongVersionResponse
from app.modules.song_versions.service import SongVersionService
from app.core.dependencies import require_permission
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/song-versions", tags=["song-versions"])


def get_song_version_service(supabase: Client = Depends(get_supabase)) -> SongVersionService:
    return SongVersionService(supabase)


@router.get("/song/{song_id}", response_model=DataResponse[List[SongVersionResponse]])
async def list_song_versions(
    song_id: UuidPath,
    user_data: Dict = Depends(require_permission("song_versions:read")),
    service: SongVersionService = Depends(get_song_version_service)
):
    return {"data": service.list_for_song(song_id)}


@router.get("/{version_id}", response_model=DataResponse[SongVersionResponse])
async def get_song_version(
    version_id: UuidPath,
    user_data: Dict = Depends(require_permission("song_versions:read")),
    service: SongVersionService = Depends(get_song_version_service)
):
    return {"data": service.get_version(version_id)}


@router.post("", response_model=DataResponse[SongVersionResponse], status_code=201)
async def create_song_version(
    version_data: SongVersionCreate,
    user_data: Dict = Depends(require_permission("song_versions:create")),
    service: SongVersionService = Depends(get_song_version_service)
):
    return {"data": service.create_version(version_data)}


@router.put("/{version_id}", response_model=DataResponse[SongVersionResponse])
async def update_song_version(
    version_id: UuidPath,
    version_data: SongVersionUpdate,
    user_data: Dict = Depends(require_permission("song_versions:update")),
    service: SongVersionService = Depends(get_song_version_service)
):
    return {"data": service.update_version(version_id, version_data)}


@router.delete("/{version_id}", response_model=DataResponse[MessageResponse])
async def delete_song_version(
    version_id: UuidPath,
    user_data: Dict = Depends(require_permission("song_versions:delete")),
    service: SongVersionService = Depends(get_song_version_service)
):
    service.delete_version(version_id)
    return {"data": {"message": "Song version deleted"}}
