from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.modules.users.models import Role


class UserResponse(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    phone_e164: Optional[str] = None
    roles: List[str] = []
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserRolesUpdate(CamelModel):
    roles: List[Role] = Field(min_length=1)

    @field_validator("roles")
    @classmethod
    def dedupe_roles(cls, v: List[Role]) -> List[Role]:
        return list(dict.fromkeys(v))


class UserActiveUpdate(CamelModel):
    is_active: bool
