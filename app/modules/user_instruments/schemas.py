from pydantic import Field, field_validator
from typing import List, Optional
from app.core.schemas import CamelModel, UUID_PATTERN
from app.modules.user_instruments.models import MIN_PROFICIENCY, MAX_PROFICIENCY


class UserInstrumentCreate(CamelModel):
    instrument_id: str = Field(pattern=UUID_PATTERN)
    is_primary: bool = False
    proficiency_level: Optional[int] = Field(None, ge=MIN_PROFICIENCY, le=MAX_PROFICIENCY)


class UserInstrumentsReplace(CamelModel):
    """Full list of what a user plays; an empty list clears it."""
    instruments: List[UserInstrumentCreate]

    @field_validator("instruments")
    @classmethod
    def one_entry_per_instrument(cls, v: List[UserInstrumentCreate]) -> List[UserInstrumentCreate]:
        ids = [i.instrument_id for i in v]
        if len(set(ids)) != len(ids):
            raise ValueError("Each instrument may only be listed once")
        if sum(1 for i in v if i.is_primary) > 1:
            raise ValueError("Only one instrument can be primary")
        return v


class UserInstrumentResponse(CamelModel):
    id: str
    code: str
    display_name: str
    is_primary: bool = False
    proficiency_level: Optional[int] = None
