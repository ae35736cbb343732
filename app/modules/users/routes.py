from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserResponse, UserRolesUpdate, UserActiveUpdate
from app.modules.users.models import Role
from app.modules.users.service import UserService
from app.core.dependencies import require_permission, get_current_user, authorize
from app.core.schemas import DataResponse, UuidPath, UUID_PATTERN
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=DataResponse[List[UserResponse]])
async def list_users(
    role: Optional[Role] = None,
    active_only: bool = False,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    instrument_id: Optional[str] = Query(None, alias="instrumentId", pattern=UUID_PATTERN),
    user_data: Dict = Depends(require_permission("users:read")),
    service: UserService = Depends(get_user_service)
):
    """List users (admin/leader). Filter by role or by an instrument they play."""
    users = service.list_users(
        role=role.value if role else None,
        active_only=active_only,
        limit=limit,
        offset=offset,
        instrument_id=instrument_id,
    )
    return {"data": users}


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: UuidPath,
    current_user: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Get user by ID (self, or admin/leader)"""
    authorize(current_user, "users:read", is_owner=current_user["id"] == user_id)
    return {"data": service.get_user_by_id(user_id)}


@router.put("/{user_id}/roles", response_model=DataResponse[UserResponse])
async def update_user_roles(
    user_id: UuidPath,
    roles_data: UserRolesUpdate,
    user_data: Dict = Depends(require_permission("users:update")),
    service: UserService = Depends(get_user_service)
):
    """Replace a user's roles (admin)"""
    return {"data": service.update_roles(user_id, roles_data)}


@router.put("/{user_id}/active", response_model=DataResponse[UserResponse])
async def set_user_active(
    user_id: UuidPath,
    active_data: UserActiveUpdate,
    user_data: Dict = Depends(require_permission("users:update")),
    service: UserService = Depends(get_user_service)
):
    """Activate or deactivate a user (admin)"""
    return {"data": service.set_active(user_id, active_data)}
