from pydantic import Field
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.worship_sets.models import SetStatus
from app.modules.set_songs.schemas import SetSongResponse
from app.modules.assignments.schemas import AssignmentResponse, AssigneeSummary
from app.modules.suggestion_slots.schemas import SuggestionSlotResponse


class WorshipSetCreate(CamelModel):
    service_id: str = Field(pattern=UUID_PATTERN)
    suggest_due_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=1000)


class WorshipSetUpdate(CamelModel):
    status: Optional[SetStatus] = None
    suggest_due_at: Optional[datetime] = None
    notes: Optional[str] = Field(None, max_length=1000)


class AssignLeaderRequest(CamelModel):
    leader_user_id: Optional[str] = Field(None, pattern=UUID_PATTERN)


class WorshipSetResponse(CamelModel):
    id: str
    service_id: str
    status: SetStatus = SetStatus.DRAFT
    suggest_due_at: Optional[datetime] = None
    notes: Optional[str] = None
    leader_user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    leader_user: Optional[AssigneeSummary] = None
    song_count: Optional[int] = None


class WorshipSetDetailResponse(WorshipSetResponse):
    set_songs: List[SetSongResponse] = []
    assignments: List[AssignmentResponse] = []
    suggestion_slots: List[SuggestionSlotResponse] = []
