from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config.settings import settings

# Shared so routers can apply per-route limits without importing app.main
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
