from pydantic import Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.core.schemas import CamelModel, UUID_PATTERN


class LeaderRotationCreate(CamelModel):
    user_id: str = Field(pattern=UUID_PATTERN)
    service_type_id: str = Field(pattern=UUID_PATTERN)
    rotation_order: int = Field(1, ge=1)


class LeaderRotationUpdate(CamelModel):
    rotation_order: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None


class LeaderRotationReorder(CamelModel):
    service_type_id: str = Field(pattern=UUID_PATTERN)
    rotation_ids: List[str] = Field(min_length=1)

    @field_validator("rotation_ids")
    @classmethod
    def unique_ids(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("rotationIds must not contain duplicates")
        return v


class RotationUser(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = []


class LeaderRotationResponse(CamelModel):
    id: str
    user_id: str
    service_type_id: str
    rotation_order: int
    is_active: bool = True
    created_at: Optional[datetime] = None
    user: Optional[RotationUser] = None
