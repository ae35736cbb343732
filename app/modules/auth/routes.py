from fastapi import APIRouter, Depends, Request
from app.modules.auth.schemas import LoginRequest, TokenExchangeRequest, TokenResponse, MeResponse
from app.modules.auth.service import AuthService
from app.core.dependencies import get_auth_service, get_current_user
from app.core.rate_limit import limiter
from app.core.schemas import DataResponse
from app.config.permissions_config import permissions_for_roles
from app.config.settings import settings
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=DataResponse[TokenResponse])
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login with email and password and get an access token"""
    return {"data": service.login(login_data)}


@router.post("/token", response_model=DataResponse[TokenResponse])
async def exchange_token(
    exchange_data: TokenExchangeRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange a web session (refresh token) for a bearer token"""
    return {"data": service.exchange_session(exchange_data.refresh_token)}


@router.get("/me", response_model=DataResponse[MeResponse])
async def get_me(current_user: Dict = Depends(get_current_user)):
    """Get current authenticated user and their permissions (for frontend UI)."""
    permissions = permissions_for_roles(current_user.get("roles", []))
    return {"data": MeResponse(**current_user, permissions=permissions)}
