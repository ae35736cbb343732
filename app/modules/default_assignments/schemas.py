from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN


class DefaultAssignmentCreate(CamelModel):
    service_type_id: str = Field(pattern=UUID_PATTERN)
    instrument_id: str = Field(pattern=UUID_PATTERN)
    user_id: str = Field(pattern=UUID_PATTERN)


class DefaultAssignmentUpdate(CamelModel):
    user_id: str = Field(pattern=UUID_PATTERN)


class DefaultAssignmentResponse(CamelModel):
    id: str
    service_type_id: str
    instrument_id: str
    user_id: str
    created_at: Optional[datetime] = None
