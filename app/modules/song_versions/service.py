import logging
from supabase import Client
from app.modules.song_versions.schemas import SongVersionCreate, SongVersionUpdate, SongVersionResponse
from app.core.exceptions import NotFoundError, ValidationError, InternalError, is_foreign_key_violation
from app.database.supabase_client import fetch_one
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class SongVersionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_for_song(self, song_id: str) -> List[SongVersionResponse]:
        try:
            result = self.supabase.table("song_versions")\
                .select("*")\
                .eq("song_id", song_id)\
                .order("name")\
                .execute()
            return [SongVersionResponse(**row) for row in result.data]
        except Exception as e:
            logger.error(f"Error listing versions of song {song_id}: {e}")
            raise InternalError()

    def get_version(self, version_id: str) -> SongVersionResponse:
        try:
            row = fetch_one(self.supabase, "song_versions", version_id)
            if not row:
                raise NotFoundError("Song version not found")
            return SongVersionResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching song version {version_id}: {e}")
            raise InternalError()

    def create_version(self, data: SongVersionCreate) -> SongVersionResponse:
        try:
            if not fetch_one(self.supabase, "songs", data.song_id, "id"):
                raise NotFoundError("Song not found")
            result = self.supabase.table("song_versions")\
                .insert(data.model_dump(mode="json", exclude_none=True))\
                .execute()
            if not result.data:
                raise InternalError("Could not create song version")
            return SongVersionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating song version: {e}")
            raise InternalError("Could not create song version")

    def update_version(self, version_id: str, data: SongVersionUpdate) -> SongVersionResponse:
        try:
            update_data = data.model_dump(mode="json", exclude_unset=True)
            if not update_data:
                return self.get_version(version_id)
            result = self.supabase.table("song_versions")\
                .update(update_data)\
                .eq("id", version_id)\
                .execute()
            if not result.data:
                raise NotFoundError("Song version not found")
            return SongVersionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating song version {version_id}: {e}")
            raise InternalError("Could not update song version")

    def delete_version(self, version_id: str) -> None:
        try:
            if not fetch_one(self.supabase, "song_versions", version_id, "id"):
                raise NotFoundError("Song version not found")
            in_use = self.supabase.table("set_songs")\
                .select("id")\
                .eq("song_version_id", version_id)\
                .limit(1)\
                .execute()
            if in_use.data:
                raise ValidationError("Song version is used in a worship set")
            self.supabase.table("song_versions").delete().eq("id", version_id).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_foreign_key_violation(e):
                raise ValidationError("Song version is still referenced")
            logger.error(f"Error deleting song version {version_id}: {e}")
            raise InternalError("Could not delete song version")
