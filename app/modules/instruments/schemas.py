from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel


class InstrumentCreate(CamelModel):
    code: str = Field(min_length=1, max_length=50)
    display_name: str = Field(min_length=1, max_length=100)
    max_per_set: int = Field(1, ge=1)


class InstrumentUpdate(CamelModel):
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    max_per_set: Optional[int] = Field(None, ge=1)


class InstrumentResponse(CamelModel):
    id: str
    code: str
    display_name: str
    max_per_set: int = 1
    created_at: Optional[datetime] = None
