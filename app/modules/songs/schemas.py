from pydantic import Field, HttpUrl
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel
from app.modules.song_versions.schemas import SongVersionResponse


class SongCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    artist: Optional[str] = Field(None, max_length=200)
    ccli_number: Optional[str] = Field(None, max_length=50)
    default_youtube_url: Optional[HttpUrl] = None
    tags: List[str] = []
    language: Optional[str] = Field(None, max_length=50)
    familiarity_score: int = Field(50, ge=0, le=100)


class SongUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    artist: Optional[str] = Field(None, max_length=200)
    ccli_number: Optional[str] = Field(None, max_length=50)
    default_youtube_url: Optional[HttpUrl] = None
    tags: Optional[List[str]] = None
    language: Optional[str] = Field(None, max_length=50)
    familiarity_score: Optional[int] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None


class SongResponse(CamelModel):
    id: str
    title: str
    artist: Optional[str] = None
    ccli_number: Optional[str] = None
    default_youtube_url: Optional[str] = None
    tags: List[str] = []
    language: Optional[str] = None
    familiarity_score: int = 50
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    versions: List[SongVersionResponse] = []
