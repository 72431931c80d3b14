# charlotte/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client, ClientOptions

from charlotte.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - preloading the catalog snapshot at startup

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def supabase_for_token(access_token: str) -> Client:
    """
    Create a Supabase client acting as the caller.

    The anon key identifies the project; the caller's access token goes in
    the Authorization header so PostgREST and Storage apply the caller's RLS
    policies, exactly as a browser client would.

    Not cached: one client per request.
    """
    options = ClientOptions(headers={"Authorization": f"Bearer {access_token}"})
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY, options=options)
