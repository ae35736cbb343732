from pydantic import EmailStr, Field
from typing import List, Optional
from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenExchangeRequest(CamelModel):
    refresh_token: str = Field(min_length=1)


class SessionUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    roles: List[str] = []


class TokenResponse(CamelModel):
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: Optional[float] = None
    user: Optional[SessionUser] = None


class MeResponse(SessionUser):
    phone_e164: Optional[str] = None
    permissions: List[str] = []
