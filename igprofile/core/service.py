"""Profile lookup pipeline - coordinates cache, provider, mirroring and persistence."""

from datetime import datetime, timedelta, timezone
from typing import Callable

from igprofile.assets.base import AssetStore
from igprofile.assets.local_storage import LocalAssetStore
from igprofile.assets.supabase_storage import SupabaseStorage
from igprofile.cache.base import ProfileCache
from igprofile.cache.redis_cache import RedisCache
from igprofile.cache.sqlite_cache import SQLiteCache
from igprofile.cache.supabase_cache import SupabaseCache
from igprofile.config import AssetBackend, CacheBackend, ServiceConfig
from igprofile.core.provider import HikerClient
from igprofile.core.username import clean_username
from igprofile.exceptions import (
    AssetMirrorError,
    CacheReadError,
    CacheWriteError,
    ProfileNotFoundError,
    UpstreamError,
)
from igprofile.logging import get_logger
from igprofile.models.profile import ProfileRecord
from igprofile.models.result import LookupResult


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def record_age(updated_at: datetime, now: datetime) -> timedelta:
    """Time elapsed since updated_at. Naive timestamps are taken as UTC."""
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)
    return now - updated_at


def build_cache(config: ServiceConfig) -> ProfileCache:
    """Create the profile store selected by config.cache_backend."""
    if config.cache_backend == CacheBackend.SQLITE:
        return SQLiteCache(config.sqlite_path, config.profiles_table)
    if config.cache_backend == CacheBackend.REDIS:
        return RedisCache(config.redis_url)
    return SupabaseCache(
        config.supabase_url,
        config.supabase_service_role_key,
        table=config.profiles_table,
        timeout_seconds=config.http_timeout_seconds,
    )


def build_assets(config: ServiceConfig) -> AssetStore | None:
    """Create the picture store selected by config.asset_backend, None if disabled."""
    if config.asset_backend == AssetBackend.NONE:
        return None
    if config.asset_backend == AssetBackend.LOCAL:
        return LocalAssetStore(config.local_asset_dir, config.local_asset_base_url)
    return SupabaseStorage(
        config.supabase_url,
        config.supabase_service_role_key,
        bucket=config.pictures_bucket,
        timeout_seconds=config.http_timeout_seconds,
    )


class ProfileLookupService:
    """
    Cached Instagram profile lookups.

    Example:
        async with ProfileLookupService(ServiceConfig()) as service:
            result = await service.lookup("@Instagram")
            print(result.profile.full_name, result.cached)
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        cache: ProfileCache | None = None,
        provider: HikerClient | None = None,
        assets: AssetStore | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize the service.

        Collaborators left as None are built from config on entry.

        Args:
            config: ServiceConfig instance, uses defaults if None
            cache: Profile store
            provider: HikerAPI client
            assets: Picture store, mirroring is skipped when absent
            clock: Source of the current UTC time
        """
        self.config = config or ServiceConfig()
        self.ttl = timedelta(seconds=self.config.cache_ttl_seconds)
        self._cache = cache
        self._provider = provider
        self._assets = assets
        self._clock = clock
        self._log = get_logger("lookup")

    async def __aenter__(self) -> "ProfileLookupService":
        """Build any collaborator that was not injected."""
        needs_assets = self._assets is None and self.config.asset_backend != AssetBackend.NONE
        if self._provider is None or self._cache is None or needs_assets:
            self.config.require_complete()

        if self._provider is None:
            self._provider = HikerClient(
                self.config.hiker_api_key,
                base_url=self.config.hiker_base_url,
                timeout_seconds=self.config.http_timeout_seconds,
            )
        if self._cache is None:
            self._cache = build_cache(self.config)
        if self._assets is None:
            self._assets = build_assets(self.config)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close every collaborator."""
        for resource in (self._cache, self._provider, self._assets):
            if resource is not None:
                await resource.close()

    async def lookup(self, username: str, force_refresh: bool = False) -> LookupResult:
        """
        Return a profile, from the cache when fresh enough.

        Args:
            username: Instagram handle, "@" prefix and case are ignored
            force_refresh: Skip the cache read and always ask the provider

        Returns:
            LookupResult with the record and whether it came from the cache

        Raises:
            InvalidUsernameError: If the handle is malformed
            ProfileNotFoundError: If the provider has no such profile
            UpstreamError: If the provider call fails
        """
        username = clean_username(username)
        now = self._clock()
        self._log.info("lookup_start", username=username, force_refresh=force_refresh)

        if not force_refresh:
            stored = await self._read_cache(username)
            if stored is not None:
                age = record_age(stored.updated_at, now)
                if age < self.ttl:
                    self._log.info("cache_hit", username=username, age=str(age))
                    return LookupResult(profile=stored, cached=True)
                self._log.info("cache_stale", username=username, age=str(age))

        try:
            fetched = await self._provider.fetch_profile(username)
        except ProfileNotFoundError:
            self._log.info("profile_not_found", username=username)
            raise
        except UpstreamError as e:
            self._log.error("upstream_failed", username=username, status=e.status, error=str(e))
            raise

        record = ProfileRecord.from_provider(fetched, username=username, updated_at=now)

        if self._assets is not None and record.profile_pic_url:
            record = await self._mirror_picture(record)

        cache_error = None
        try:
            await self._cache.upsert(record)
        except CacheWriteError as e:
            cache_error = str(e)
            self._log.error("cache_write_failed", username=username, profile_id=record.id, error=cache_error)

        self._log.info("lookup_complete", username=username, profile_id=record.id)
        return LookupResult(profile=record, cached=False, cache_error=cache_error)

    async def _read_cache(self, username: str) -> ProfileRecord | None:
        """Read the stored record, treating a failed read as a miss."""
        try:
            return await self._cache.get(username)
        except CacheReadError as e:
            self._log.error("cache_read_failed", username=username, error=str(e))
            return None

    async def _mirror_picture(self, record: ProfileRecord) -> ProfileRecord:
        """
        Copy the profile picture into the asset store.

        Returns the record pointing at the mirrored copy, or unchanged when
        the download or the upload fails.
        """
        try:
            image = await self._provider.download_image(record.profile_pic_url)
            public_url = await self._assets.upload(str(record.id), image.data, image.content_type)
        except AssetMirrorError as e:
            self._log.warning("asset_mirror_failed", profile_id=record.id, error=str(e))
            return record

        return record.model_copy(update={"profile_pic_url": public_url})
