import logging
from supabase import Client
from app.modules.set_songs.schemas import SetSongCreate, SetSongUpdate, SetSongReorder, SetSongResponse
from app.core.exceptions import NotFoundError, ValidationError, CapacityError, InternalError
from app.database.supabase_client import fetch_one
from app.config.settings import settings
from typing import Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class SetSongService:
    """Finalized song list of a worship set.

    A set holds at most `settings.set_song_limit` songs, of which at most
    `settings.new_song_limit` are flagged new. Positions are 1-based and kept
    contiguous: inserts and deletes shift the songs after them.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _rows_for_set(self, set_id: str) -> List[dict]:
        result = self.supabase.table("set_songs")\
            .select("*")\
            .eq("set_id", set_id)\
            .order("position")\
            .execute()
        return result.data

    def _with_details(self, rows: List[dict]) -> List[SetSongResponse]:
        version_ids = list({r["song_version_id"] for r in rows})
        versions: Dict[str, dict] = {}
        songs: Dict[str, dict] = {}
        if version_ids:
            result = self.supabase.table("song_versions").select("*").in_("id", version_ids).execute()
            versions = {v["id"]: v for v in result.data}
            song_ids = list({v["song_id"] for v in result.data})
            if song_ids:
                result = self.supabase.table("songs")\
                    .select("id, title, artist, familiarity_score")\
                    .in_("id", song_ids)\
                    .execute()
                songs = {s["id"]: s for s in result.data}
        detailed = []
        for row in rows:
            version = versions.get(row["song_version_id"])
            song = songs.get(version["song_id"]) if version else None
            detailed.append(SetSongResponse(**row, song_version=version, song=song))
        return detailed

    def is_new_song(self, song_version_id: str) -> bool:
        """A song counts as new when its familiarity score is below the threshold."""
        version = fetch_one(self.supabase, "song_versions", song_version_id, "id, song_id")
        if not version:
            raise NotFoundError("Song version not found")
        song = fetch_one(self.supabase, "songs", version["song_id"], "id, familiarity_score")
        if not song:
            return False
        return (song.get("familiarity_score") or 0) < settings.new_song_familiarity_threshold

    def ensure_capacity(self, rows: List[dict], adding_new: bool, adding_song: bool = True) -> None:
        """Raise CapacityError if the change would break the song or new-song ceiling."""
        if adding_song and len(rows) >= settings.set_song_limit:
            raise CapacityError(f"A worship set can have at most {settings.set_song_limit} songs")
        if adding_new and sum(1 for r in rows if r.get("is_new")) >= settings.new_song_limit:
            raise CapacityError(f"A worship set can have at most {settings.new_song_limit} new song")

    def list_for_set(self, set_id: str) -> List[SetSongResponse]:
        try:
            return self._with_details(self._rows_for_set(set_id))
        except Exception as e:
            logger.error(f"Error listing set songs for {set_id}: {e}")
            raise InternalError("Could not list set songs")

    def get_set_song(self, set_song_id: str) -> SetSongResponse:
        try:
            row = fetch_one(self.supabase, "set_songs", set_song_id)
            if not row:
                raise NotFoundError("Set song not found")
            return self._with_details([row])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching set song {set_song_id}: {e}")
            raise InternalError("Could not fetch set song")

    def add_song(
        self,
        set_id: str,
        song_version_id: str,
        position: Optional[int] = None,
        is_new: Optional[bool] = None,
        key_override: Optional[str] = None,
        youtube_url_override: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> SetSongResponse:
        """Add a song to a set, at `position` or after the last song."""
        try:
            if not fetch_one(self.supabase, "worship_sets", set_id, "id"):
                raise NotFoundError("Worship set not found")
            if is_new is None:
                is_new = self.is_new_song(song_version_id)
            elif not fetch_one(self.supabase, "song_versions", song_version_id, "id"):
                raise NotFoundError("Song version not found")

            rows = self._rows_for_set(set_id)
            self.ensure_capacity(rows, adding_new=is_new)

            next_position = len(rows) + 1
            if position is None or position > next_position:
                position = next_position
            for row in sorted(rows, key=lambda r: r["position"], reverse=True):
                if row["position"] >= position:
                    self.supabase.table("set_songs")\
                        .update({"position": row["position"] + 1})\
                        .eq("id", row["id"])\
                        .execute()

            record = {
                "set_id": set_id,
                "song_version_id": song_version_id,
                "position": position,
                "is_new": is_new,
                "key_override": key_override,
                "youtube_url_override": youtube_url_override,
                "notes": notes,
            }
            result = self.supabase.table("set_songs")\
                .insert({k: v for k, v in record.items() if v is not None})\
                .execute()
            if not result.data:
                raise InternalError("Could not add song to set")
            logger.info(f"Added song version {song_version_id} to set {set_id} at {position}")
            return self._with_details(result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding song to set {set_id}: {e}")
            raise InternalError("Could not add song to set")

    def create_set_song(self, data: SetSongCreate) -> SetSongResponse:
        payload = data.model_dump(mode="json")
        return self.add_song(
            set_id=data.set_id,
            song_version_id=data.song_version_id,
            position=data.position,
            is_new=data.is_new,
            key_override=data.key_override,
            youtube_url_override=payload.get("youtube_url_override"),
            notes=data.notes,
        )

    def update_set_song(self, set_song_id: str, data: SetSongUpdate) -> SetSongResponse:
        try:
            row = fetch_one(self.supabase, "set_songs", set_song_id)
            if not row:
                raise NotFoundError("Set song not found")
            update_data = data.model_dump(mode="json", exclude_unset=True)
            position = update_data.pop("position", None)

            if update_data.get("is_new") and not row.get("is_new"):
                others = [r for r in self._rows_for_set(row["set_id"]) if r["id"] != set_song_id]
                self.ensure_capacity(others, adding_new=True, adding_song=False)

            if update_data:
                self.supabase.table("set_songs").update(update_data).eq("id", set_song_id).execute()
            if position is not None and position != row["position"]:
                ordered = [r["id"] for r in self._rows_for_set(row["set_id"]) if r["id"] != set_song_id]
                ordered.insert(min(position, len(ordered) + 1) - 1, set_song_id)
                self._apply_order(ordered)
            return self.get_set_song(set_song_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating set song {set_song_id}: {e}")
            raise InternalError("Could not update set song")

    def delete_set_song(self, set_song_id: str) -> None:
        """Remove a song and close the gap in positions."""
        try:
            row = fetch_one(self.supabase, "set_songs", set_song_id, "id, set_id, position")
            if not row:
                raise NotFoundError("Set song not found")
            self.supabase.table("set_songs").delete().eq("id", set_song_id).execute()
            later = self.supabase.table("set_songs")\
                .select("id, position")\
                .eq("set_id", row["set_id"])\
                .gt("position", row["position"])\
                .order("position")\
                .execute()
            for song in later.data:
                self.supabase.table("set_songs")\
                    .update({"position": song["position"] - 1})\
                    .eq("id", song["id"])\
                    .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting set song {set_song_id}: {e}")
            raise InternalError("Could not delete set song")

    def reorder(self, set_id: str, data: SetSongReorder) -> List[SetSongResponse]:
        try:
            existing = {r["id"] for r in self._rows_for_set(set_id)}
            invalid = [i for i in data.song_ids if i not in existing]
            if invalid:
                raise ValidationError("Some song IDs do not belong to this worship set")
            if len(data.song_ids) != len(existing):
                raise ValidationError("songIds must list every song in the worship set")
            self._apply_order(data.song_ids)
            return self.list_for_set(set_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error reordering set {set_id}: {e}")
            raise InternalError("Could not reorder songs")

    def _apply_order(self, ordered_ids: List[str]) -> None:
        for index, set_song_id in enumerate(ordered_ids, start=1):
            self.supabase.table("set_songs")\
                .update({"position": index})\
                .eq("id", set_song_id)\
                .execute()
