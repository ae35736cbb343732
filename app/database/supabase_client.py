from supabase import create_client, Client
from app.config.settings import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use for seeding."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()


def get_supabase() -> Client:
    """Request-scoped handle to the data store, injected with Depends."""
    return SupabaseClient.get_client()


def fetch_one(supabase: Client, table: str, row_id: str, columns: str = "*"):
    """Return a single row by id, or None when it does not exist."""
    result = supabase.table(table).select(columns).eq("id", row_id).limit(1).execute()
    if not result.data:
        return None
    return result.data[0]
