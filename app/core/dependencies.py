"""
Core dependencies for route protection and permission checking.

Request flow: bearer token -> active user -> role check -> ownership check.
A missing or invalid token is a 401; a failed role/ownership check is a 403.
"""

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, fetch_one
from app.modules.auth.service import AuthService
from app.config.permissions_config import evaluate_policy
from app.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to the current user; cached on the request."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing token")
    if getattr(request.state, "user", None) is not None:
        return request.state.user
    user_data = auth_service.get_current_user(credentials.credentials)
    request.state.user = user_data
    return user_data


def has_permission(user_data: dict, permission: str, is_owner: bool = False) -> bool:
    return evaluate_policy(user_data.get("roles", []), permission, is_owner=is_owner)


def authorize(user_data: dict, permission: str, is_owner: bool = False, message: Optional[str] = None) -> dict:
    """Raise 403 unless the policy allows `permission` for this user."""
    if not has_permission(user_data, permission, is_owner=is_owner):
        logger.info(f"Denied {permission} for user {user_data.get('id')}")
        raise AuthorizationError(message or "Forbidden: insufficient role")
    return user_data


def require_permission(required_permission: str):
    """Factory function to create a role-only permission check dependency"""
    def check_permission(user_data: dict = Depends(get_current_user)) -> dict:
        return authorize(user_data, required_permission)
    return check_permission


def is_worship_set_leader(supabase: Client, worship_set_id: str, user_id: str, worship_set: Optional[Dict[str, Any]] = None) -> bool:
    """True if the user is the leader of this specific worship set."""
    if worship_set is None:
        worship_set = fetch_one(supabase, "worship_sets", worship_set_id, "id, leader_user_id")
    if not worship_set:
        return False
    return worship_set.get("leader_user_id") is not None and worship_set.get("leader_user_id") == user_id


def require_worship_set_permission(permission: str, set_id_param: str = "set_id"):
    """Permission check where leading the worship set in the path counts as ownership."""
    def check(
        request: Request,
        user_data: dict = Depends(get_current_user),
        supabase: Client = Depends(get_supabase)
    ) -> dict:
        worship_set_id = request.path_params.get(set_id_param)
        if has_permission(user_data, permission):
            return user_data
        worship_set = fetch_one(supabase, "worship_sets", worship_set_id, "id, leader_user_id")
        if not worship_set:
            raise NotFoundError("Worship set not found")
        is_leader = is_worship_set_leader(supabase, worship_set_id, user_data["id"], worship_set)
        return authorize(
            user_data, permission, is_owner=is_leader,
            message="Only the worship set leader or an admin can perform this action"
        )
    return check
