from pydantic import Field, HttpUrl
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN


class SongVersionCreate(CamelModel):
    song_id: str = Field(pattern=UUID_PATTERN)
    name: str = Field(min_length=1, max_length=100)
    youtube_url: Optional[HttpUrl] = None
    default_key: Optional[str] = Field(None, max_length=10)
    bpm: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class SongVersionUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    youtube_url: Optional[HttpUrl] = None
    default_key: Optional[str] = Field(None, max_length=10)
    bpm: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class SongVersionResponse(CamelModel):
    id: str
    song_id: str
    name: str
    youtube_url: Optional[str] = None
    default_key: Optional[str] = None
    bpm: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
