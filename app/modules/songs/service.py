import logging
from datetime import datetime, timezone
from supabase import Client
from app.modules.songs.schemas import SongCreate, SongUpdate, SongResponse
from app.core.exceptions import NotFoundError, InternalError
from app.database.supabase_client import fetch_one
from typing import Dict, List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class SongService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _versions_by_song(self, song_ids: List[str]) -> Dict[str, list]:
        if not song_ids:
            return {}
        result = self.supabase.table("song_versions")\
            .select("*")\
            .in_("song_id", song_ids)\
            .order("name")\
            .execute()
        grouped: Dict[str, list] = {song_id: [] for song_id in song_ids}
        for version in result.data:
            grouped.setdefault(version["song_id"], []).append(version)
        return grouped

    def list_songs(self) -> List[SongResponse]:
        """Active songs ordered by title, each with its versions."""
        try:
            result = self.supabase.table("songs")\
                .select("*")\
                .eq("is_active", True)\
                .order("title")\
                .execute()
            versions = self._versions_by_song([s["id"] for s in result.data])
            return [SongResponse(**song, versions=versions.get(song["id"], [])) for song in result.data]
        except Exception as e:
            logger.error(f"Error listing songs: {e}")
            raise InternalError("Could not list songs")

    def get_song(self, song_id: str) -> SongResponse:
        try:
            song = fetch_one(self.supabase, "songs", song_id)
            if not song:
                raise NotFoundError("Song not found")
            versions = self._versions_by_song([song_id])
            return SongResponse(**song, versions=versions.get(song_id, []))
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching song {song_id}: {e}")
            raise InternalError("Could not fetch song")

    def create_song(self, song_data: SongCreate) -> SongResponse:
        try:
            result = self.supabase.table("songs")\
                .insert(song_data.model_dump(mode="json", exclude_none=True))\
                .execute()
            if not result.data:
                raise InternalError("Could not create song")
            logger.info(f"Created song {result.data[0]['id']}: {song_data.title}")
            return SongResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating song: {e}")
            raise InternalError("Could not create song")

    def update_song(self, song_id: str, song_data: SongUpdate) -> SongResponse:
        try:
            update_data = song_data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self.get_song(song_id)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("songs")\
                .update(update_data)\
                .eq("id", song_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Song not found")
            return SongResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating song {song_id}: {e}")
            raise InternalError("Could not update song")

    def delete_song(self, song_id: str) -> SongResponse:
        """Soft delete: the song is marked inactive and drops out of listings."""
        try:
            result = self.supabase.table("songs")\
                .update({"is_active": False, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", song_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Song not found")
            logger.info(f"Deactivated song {song_id}")
            return SongResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting song {song_id}: {e}")
            raise InternalError("Could not delete song")
