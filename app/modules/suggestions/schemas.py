from pydantic import Field, HttpUrl
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.suggestions.models import SuggestionStatus
from app.modules.set_songs.schemas import SongSummary


class SuggestionCreate(CamelModel):
    slot_id: str = Field(pattern=UUID_PATTERN)
    song_id: str = Field(pattern=UUID_PATTERN)
    youtube_url_override: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=500)


class SuggestionUpdate(CamelModel):
    youtube_url_override: Optional[HttpUrl] = None
    notes: Optional[str] = Field(None, max_length=500)


class SuggestionApprove(CamelModel):
    song_version_id: str = Field(pattern=UUID_PATTERN)


class SuggestionResponse(CamelModel):
    id: str
    slot_id: str
    song_id: str
    notes: Optional[str] = None
    youtube_url_override: Optional[str] = None
    status: SuggestionStatus = SuggestionStatus.PENDING
    created_at: Optional[datetime] = None
    song: Optional[SongSummary] = None


class SetSuggestionResponse(SuggestionResponse):
    """A suggestion of a worship set, flattened with who suggested it."""
    set_id: str
    suggested_by_id: str
    suggested_by_name: Optional[str] = None
    slot_due_at: Optional[datetime] = None
