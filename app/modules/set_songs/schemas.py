from pydantic import Field, HttpUrl, field_validator
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.song_versions.schemas import SongVersionResponse


class SetSongCreate(CamelModel):
    set_id: str = Field(pattern=UUID_PATTERN)
    song_version_id: str = Field(pattern=UUID_PATTERN)
    position: Optional[int] = Field(None, ge=1)
    key_override: Optional[str] = Field(None, max_length=10)
    youtube_url_override: Optional[HttpUrl] = None
    is_new: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=500)


class SetSongUpdate(CamelModel):
    position: Optional[int] = Field(None, ge=1)
    key_override: Optional[str] = Field(None, max_length=10)
    youtube_url_override: Optional[HttpUrl] = None
    is_new: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=500)


class SetSongReorder(CamelModel):
    song_ids: List[str] = Field(min_length=1)

    @field_validator("song_ids")
    @classmethod
    def unique_ids(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("songIds must not contain duplicates")
        return v


class SongSummary(CamelModel):
    id: str
    title: str
    artist: Optional[str] = None
    familiarity_score: int = 50


class SetSongResponse(CamelModel):
    id: str
    set_id: str
    song_version_id: str
    position: int
    key_override: Optional[str] = None
    youtube_url_override: Optional[str] = None
    is_new: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    song_version: Optional[SongVersionResponse] = None
    song: Optional[SongSummary] = None
