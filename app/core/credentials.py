"""
Credential exchange: turn a web session into a bearer token the API accepts.

The web client holds a Supabase session (its refresh token). Exchanging it
yields an access token that is cached per session until shortly before it
expires, so repeated page loads do not hit Supabase Auth every time.
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from supabase import Client

from app.config.settings import settings
from app.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_MAX_CACHED_SESSIONS = 1000


@dataclass
class IssuedToken:
    access_token: str
    refresh_token: str
    expires_at: float


class CredentialExchange:
    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        buffer_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.token_cache_ttl_seconds
        self.buffer_seconds = buffer_seconds if buffer_seconds is not None else settings.token_cache_buffer_seconds
        self.clock = clock
        self._cache: Dict[str, IssuedToken] = {}

    @staticmethod
    def _key(session_token: str) -> str:
        return hashlib.sha256(session_token.encode()).hexdigest()

    def exchange(self, supabase: Client, session_token: str) -> IssuedToken:
        if not session_token:
            raise AuthenticationError("No authenticated session")

        key = self._key(session_token)
        now = self.clock()
        cached = self._cache.get(key)
        if cached and cached.expires_at > now + self.buffer_seconds:
            return cached
        self._cache.pop(key, None)

        try:
            response = supabase.auth.refresh_session(session_token)
        except Exception as e:
            logger.warning(f"Session refresh failed: {type(e).__name__}")
            raise AuthenticationError("Invalid or expired session")

        session = getattr(response, "session", None)
        if not session or not session.access_token:
            raise AuthenticationError("Invalid or expired session")

        expires_at = now + self.ttl_seconds
        session_expiry = getattr(session, "expires_at", None)
        if session_expiry:
            expires_at = min(expires_at, float(session_expiry))

        issued = IssuedToken(
            access_token=session.access_token,
            refresh_token=session.refresh_token or session_token,
            expires_at=expires_at,
        )
        if len(self._cache) >= _MAX_CACHED_SESSIONS:
            self._evict_expired(now)
        if len(self._cache) < _MAX_CACHED_SESSIONS:
            self._cache[key] = issued
        return issued

    def invalidate(self, session_token: str) -> None:
        self._cache.pop(self._key(session_token), None)

    def clear(self) -> None:
        self._cache.clear()

    def _evict_expired(self, now: float) -> None:
        for key in [k for k, v in self._cache.items() if v.expires_at <= now]:
            del self._cache[key]


credential_exchange = CredentialExchange()
