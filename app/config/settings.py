from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for seeding reference data

    # App
    app_name: str = "worship-set-manager"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    login_rate_limit: str = "10/minute"
    max_request_body_bytes: int = 10 * 1024

    # Auth caches
    auth_cache_ttl_seconds: int = 60
    token_cache_ttl_seconds: int = 3600  # bridged tokens live for one hour
    token_cache_buffer_seconds: int = 300

    # Worship set rules
    set_song_limit: int = 6
    new_song_limit: int = 1
    new_song_familiarity_threshold: int = 50  # familiarity below this counts as a new song

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
