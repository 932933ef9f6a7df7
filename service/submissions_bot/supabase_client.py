from supabase import create_client, Client
from submissions_bot.config import get_settings


def get_supabase_anon() -> Client:
    """Anon client — respects RLS, read-only access to submissions."""
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key
    )
