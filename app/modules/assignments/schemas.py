from pydantic import Field, field_validator
from typing import Optional, Dict
from datetime import datetime
import re
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.assignments.models import AssignmentStatus
from app.modules.instruments.schemas import InstrumentResponse

_UUID_RE = re.compile(UUID_PATTERN)


class AssignmentCreate(CamelModel):
    set_id: str = Field(pattern=UUID_PATTERN)
    instrument_id: str = Field(pattern=UUID_PATTERN)
    user_id: str = Field(pattern=UUID_PATTERN)


class AssignmentRespond(CamelModel):
    status: AssignmentStatus


class AssignmentsUpsert(CamelModel):
    """instrumentId -> userId; null or "" clears the instrument."""
    assignments: Dict[str, Optional[str]]

    @field_validator("assignments")
    @classmethod
    def validate_ids(cls, v: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        for instrument_id, user_id in v.items():
            if not _UUID_RE.match(instrument_id):
                raise ValueError(f"Invalid instrument id: {instrument_id}")
            if user_id and user_id.strip() and not _UUID_RE.match(user_id.strip()):
                raise ValueError(f"Invalid user id for instrument {instrument_id}")
        return v


class AssigneeSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class AssignmentResponse(CamelModel):
    id: str
    set_id: str
    instrument_id: str
    user_id: str
    status: AssignmentStatus
    invited_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    instrument: Optional[InstrumentResponse] = None
    user: Optional[AssigneeSummary] = None
