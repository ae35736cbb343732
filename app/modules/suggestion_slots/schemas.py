from pydantic import Field, model_validator
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.suggestion_slots.models import SlotStatus
from app.modules.suggestions.schemas import SuggestionResponse
from app.modules.assignments.schemas import AssigneeSummary


class SuggestionSlotCreate(CamelModel):
    set_id: str = Field(pattern=UUID_PATTERN)
    assigned_user_id: str = Field(pattern=UUID_PATTERN)
    min_songs: int = Field(ge=1)
    max_songs: int = Field(ge=1)
    due_at: datetime

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_songs > self.max_songs:
            raise ValueError("minSongs cannot be greater than maxSongs")
        return self


class SuggestionSlotUpdate(CamelModel):
    min_songs: Optional[int] = Field(None, ge=1)
    max_songs: Optional[int] = Field(None, ge=1)
    due_at: Optional[datetime] = None
    status: Optional[SlotStatus] = None

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_songs is not None and self.max_songs is not None and self.min_songs > self.max_songs:
            raise ValueError("minSongs cannot be greater than maxSongs")
        return self


class SlotAssignUser(CamelModel):
    assigned_user_id: str = Field(pattern=UUID_PATTERN)


class SuggestionSlotResponse(CamelModel):
    id: str
    set_id: str
    assigned_user_id: str
    min_songs: int
    max_songs: int
    due_at: datetime
    status: SlotStatus = SlotStatus.PENDING
    created_at: Optional[datetime] = None
    assigned_user: Optional[AssigneeSummary] = None
    suggestions: List[SuggestionResponse] = []


class SlotServiceSummary(CamelModel):
    id: str
    service_date: datetime
    service_type_id: str
    service_type_name: Optional[str] = None


class MySuggestionSlotResponse(SuggestionSlotResponse):
    is_overdue: bool = False
    suggestion_count: int = 0
    service: Optional[SlotServiceSummary] = None
