"""Profile store implementations."""

from igprofile.cache.base import ProfileCache
from igprofile.cache.sqlite_cache import SQLiteCache
from igprofile.cache.redis_cache import RedisCache
from igprofile.cache.supabase_cache import SupabaseCache

__all__ = ["ProfileCache", "SQLiteCache", "RedisCache", "SupabaseCache"]
