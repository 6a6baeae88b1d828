"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings

from igprofile.exceptions import ConfigError

THIRTY_DAYS_SECONDS = 30 * 24 * 60 * 60


class CacheBackend(str, Enum):
    """Profile store backend type."""
    SUPABASE = "supabase"
    SQLITE = "sqlite"
    REDIS = "redis"


class AssetBackend(str, Enum):
    """Profile picture store type."""
    SUPABASE = "supabase"
    LOCAL = "local"
    NONE = "none"


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class ServiceConfig(BaseSettings):
    """Configuration for the profile lookup service."""

    # Provider settings
    hiker_api_key: str | None = None
    hiker_base_url: str = "https://api.hikerapi.com"
    http_timeout_seconds: float = 30.0

    # Store settings
    cache_backend: CacheBackend = CacheBackend.SUPABASE
    cache_ttl_seconds: int = THIRTY_DAYS_SECONDS
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    profiles_table: str = "instagram_profiles"
    sqlite_path: str = ".igprofile_cache.db"
    redis_url: str = "redis://localhost:6379/0"

    # Picture mirroring
    asset_backend: AssetBackend = AssetBackend.SUPABASE
    pictures_bucket: str = "instagram_profile_pictures"
    local_asset_dir: str = ".igprofile_pictures"
    local_asset_base_url: str = "http://localhost:8000/pictures"

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "IGPROFILE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def uses_supabase(self) -> bool:
        """Whether any configured backend talks to Supabase."""
        return (
            self.cache_backend == CacheBackend.SUPABASE
            or self.asset_backend == AssetBackend.SUPABASE
        )

    def missing_settings(self) -> list[str]:
        """
        List required settings that are unset for the selected backends.

        Returns:
            Environment variable names, empty when the config is complete
        """
        missing = []
        if not self.hiker_api_key:
            missing.append("IGPROFILE_HIKER_API_KEY")
        if self.uses_supabase:
            if not self.supabase_url:
                missing.append("IGPROFILE_SUPABASE_URL")
            if not self.supabase_service_role_key:
                missing.append("IGPROFILE_SUPABASE_SERVICE_ROLE_KEY")
        return missing

    def require_complete(self) -> None:
        """
        Raise if a required secret is missing.

        Raises:
            ConfigError: naming every missing environment variable
        """
        missing = self.missing_settings()
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")
