"""Unit tests for the Redis profile store - in-memory fake client."""

import pytest
import redis.asyncio as redis

from igprofile.cache.redis_cache import RedisCache
from igprofile.exceptions import CacheReadError, CacheWriteError

from conftest import make_record


class FakePipeline:
    def __init__(self, store: "FakeRedis"):
        self._store = store
        self._ops = []

    def set(self, key, value):
        self._ops.append(("set", key, value))

    def delete(self, *keys):
        self._ops.append(("delete", keys))

    async def execute(self):
        for op in self._ops:
            if op[0] == "set":
                await self._store.set(op[1], op[2])
            else:
                await self._store.delete(*op[1])
        self._ops = []


class FakeRedis:
    """Subset of redis.asyncio.Redis backed by a dict."""

    def __init__(self, fail: bool = False):
        self.data: dict[str, str] = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value):
        self._check()
        self.data[key] = value

    async def delete(self, *keys):
        self._check()
        for key in keys:
            self.data.pop(key, None)

    def pipeline(self):
        return FakePipeline(self)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake():
    return FakeRedis()


class TestRedisCache:
    """Test store operations against the fake client."""

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, fake):
        cache = RedisCache(client=fake)
        assert await cache.get("instagram") is None

    @pytest.mark.asyncio
    async def test_upsert_and_get(self, fake):
        cache = RedisCache(client=fake)
        record = make_record()
        await cache.upsert(record)

        assert await cache.get("instagram") == record
        assert fake.data["igprofile:username:instagram"] == "25025320"

    @pytest.mark.asyncio
    async def test_rename_drops_old_index(self, fake):
        cache = RedisCache(client=fake)
        await cache.upsert(make_record())
        await cache.upsert(make_record(username="instagram_official"))

        assert await cache.get("instagram") is None
        assert (await cache.get("instagram_official")).username == "instagram_official"
        assert "igprofile:username:instagram" not in fake.data

    @pytest.mark.asyncio
    async def test_username_moved_to_new_account(self, fake):
        cache = RedisCache(client=fake)
        await cache.upsert(make_record())
        await cache.upsert(make_record(id=99))

        assert (await cache.get("instagram")).id == 99

    @pytest.mark.asyncio
    async def test_close_releases_client(self, fake):
        async with RedisCache(client=fake):
            pass
        assert fake.closed is True


class TestRedisCacheErrors:
    """Test error wrapping."""

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self):
        cache = RedisCache(client=FakeRedis(fail=True))
        with pytest.raises(CacheReadError):
            await cache.get("instagram")

    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self):
        cache = RedisCache(client=FakeRedis(fail=True))
        with pytest.raises(CacheWriteError):
            await cache.upsert(make_record())

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_read_error(self, fake):
        fake.data["igprofile:username:instagram"] = "1"
        fake.data["igprofile:profile:1"] = "{not json"
        cache = RedisCache(client=fake)
        with pytest.raises(CacheReadError):
            await cache.get("instagram")

    @pytest.mark.asyncio
    async def test_non_numeric_index_is_read_error(self, fake):
        fake.data["igprofile:username:instagram"] = "not-an-id"
        cache = RedisCache(client=fake)
        with pytest.raises(CacheReadError):
            await cache.get("instagram")
