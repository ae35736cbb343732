import hashlib
import logging
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, TokenResponse, SessionUser
from app.config.settings import settings
from app.core.credentials import credential_exchange
from app.core.exceptions import AuthenticationError, InternalError
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for token -> auth user lookups (many parallel requests share one token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate with Supabase Auth and return the API bearer token"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info(f"Login rejected for {login_data.email}: {type(e).__name__}")
            raise AuthenticationError("Invalid email or password")

        if not auth_response.user or not auth_response.session:
            raise AuthenticationError("Invalid email or password")

        profile = self._load_profile(auth_response.user.id)
        if not profile.get("is_active", True):
            raise AuthenticationError("Account is deactivated")

        session = auth_response.session
        return TokenResponse(
            token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=getattr(session, "expires_at", None),
            user=SessionUser(
                id=profile["id"],
                email=profile.get("email") or auth_response.user.email or login_data.email,
                name=profile.get("name"),
                roles=profile.get("roles") or [],
            ),
        )

    def exchange_session(self, refresh_token: str) -> TokenResponse:
        """Credential exchange: web session (refresh token) -> cached bearer token"""
        issued = credential_exchange.exchange(self.supabase, refresh_token)
        return TokenResponse(
            token=issued.access_token,
            refresh_token=issued.refresh_token,
            expires_at=issued.expires_at,
        )

    def _get_auth_user(self, token: str) -> Dict[str, Any]:
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            auth_user, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return auth_user
            del _AUTH_USER_CACHE[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception:
            raise AuthenticationError("Invalid token")
        if not user_response or not user_response.user:
            raise AuthenticationError("Invalid token")
        auth_user = {"id": user_response.user.id, "email": user_response.user.email}
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (auth_user, now + settings.auth_cache_ttl_seconds)
        return auth_user

    def _load_profile(self, user_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("users")\
                .select("id, email, name, phone_e164, roles, is_active")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading user profile {user_id}: {e}")
            raise InternalError()
        if not result.data:
            raise AuthenticationError("User not found")
        return result.data[0]

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the active user row (id, email, name, roles)."""
        try:
            auth_user = self._get_auth_user(token)
            profile = self._load_profile(auth_user["id"])
            if not profile.get("is_active", True):
                raise AuthenticationError("Account is deactivated")
            return {
                "id": profile["id"],
                "email": profile.get("email") or auth_user.get("email"),
                "name": profile.get("name"),
                "phone_e164": profile.get("phone_e164"),
                "roles": profile.get("roles") or [],
            }
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Token verification failed: {type(e).__name__}")
            raise AuthenticationError("Invalid token")
