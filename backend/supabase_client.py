from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from config import _require_env


@lru_cache(maxsize=4)
def get_supabase(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    return create_client(
        url or _require_env("SUPABASE_URL"),
        key or _require_env("SUPABASE_SERVICE_ROLE_KEY"),
    )
