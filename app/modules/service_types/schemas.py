from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ServiceTypeCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    default_start_time: str = Field(pattern=TIME_PATTERN)
    rrule: Optional[str] = Field(None, max_length=500)


class ServiceTypeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    default_start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    rrule: Optional[str] = Field(None, max_length=500)


class ServiceTypeResponse(CamelModel):
    id: str
    name: str
    default_start_time: str
    rrule: Optional[str] = None
    created_at: Optional[datetime] = None
