# storefront/core/supabase_client.py
from functools import lru_cache

from supabase import create_client, Client

from storefront.core.config import get_settings


@lru_cache
def supabase_admin() -> Client:
    """
    Service-role client for the product image bucket.

    Built on first upload so the API boots without storage credentials.
    The service key must stay server-side.
    """
    settings = get_settings()
    missing = [
        key
        for key in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")
        if not getattr(settings, key)
    ]
    if missing:
        raise RuntimeError(f"Image storage is not configured, missing: {', '.join(missing)}")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
