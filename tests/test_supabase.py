"""Unit tests for the Supabase store and storage clients - mocked transport."""

import json

import httpx
import pytest

from igprofile.assets.supabase_storage import SupabaseStorage
from igprofile.cache.supabase_cache import SupabaseCache
from igprofile.exceptions import AssetMirrorError, CacheReadError, CacheWriteError

from conftest import make_record, mock_client

SUPABASE_URL = "https://ref.supabase.co"


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.response.status_code,
            headers=self.response.headers,
            content=self.response.content,
        )


class TestSupabaseCacheGet:
    """Test PostgREST reads."""

    @pytest.mark.asyncio
    async def test_hit(self):
        row = make_record().model_dump(mode="json")
        recorder = Recorder(httpx.Response(200, json=[row]))
        cache = SupabaseCache(SUPABASE_URL, "srk", client=mock_client(recorder))

        stored = await cache.get("Instagram")

        assert stored == make_record()
        request = recorder.requests[0]
        assert request.url.path == "/rest/v1/instagram_profiles"
        assert request.url.params["username"] == "eq.instagram"
        assert request.url.params["select"] == "*"
        assert request.headers["apikey"] == "srk"
        assert request.headers["authorization"] == "Bearer srk"

    @pytest.mark.asyncio
    async def test_miss(self):
        cache = SupabaseCache(SUPABASE_URL, "srk", client=mock_client(Recorder(httpx.Response(200, json=[]))))
        assert await cache.get("instagram") is None

    @pytest.mark.asyncio
    async def test_error_status_is_read_error(self):
        recorder = Recorder(httpx.Response(401, json={"message": "Invalid API key"}))
        cache = SupabaseCache(SUPABASE_URL, "bad", client=mock_client(recorder))
        with pytest.raises(CacheReadError):
            await cache.get("instagram")

    @pytest.mark.asyncio
    async def test_unexpected_row_is_read_error(self):
        recorder = Recorder(httpx.Response(200, json=[{"username": "instagram"}]))
        cache = SupabaseCache(SUPABASE_URL, "srk", client=mock_client(recorder))
        with pytest.raises(CacheReadError):
            await cache.get("instagram")


class TestSupabaseCacheUpsert:
    """Test PostgREST upserts."""

    @pytest.mark.asyncio
    async def test_upsert_targets_id(self):
        recorder = Recorder(httpx.Response(201))
        cache = SupabaseCache(SUPABASE_URL, "srk", table="profiles", client=mock_client(recorder))

        await cache.upsert(make_record())

        request = recorder.requests[-1]
        assert request.method == "POST"
        assert request.url.path == "/rest/v1/profiles"
        assert request.url.params["on_conflict"] == "id"
        assert "resolution=merge-duplicates" in request.headers["prefer"]
        body = json.loads(request.content)
        assert body["id"] == 25025320
        assert body["username"] == "instagram"
        assert body["updated_at"].startswith("2026-10-19T12:00:00")

    @pytest.mark.asyncio
    async def test_stale_username_holder_deleted_first(self):
        recorder = Recorder(httpx.Response(204))
        cache = SupabaseCache(SUPABASE_URL, "srk", client=mock_client(recorder))

        await cache.upsert(make_record(id=99))

        assert [r.method for r in recorder.requests] == ["DELETE", "POST"]
        delete = recorder.requests[0]
        assert delete.url.path == "/rest/v1/instagram_profiles"
        assert delete.url.params["username"] == "eq.instagram"
        assert delete.url.params["id"] == "neq.99"
        assert delete.headers["apikey"] == "srk"

    @pytest.mark.asyncio
    async def test_error_status_is_write_error(self):
        recorder = Recorder(httpx.Response(409, json={"message": "duplicate key value"}))
        cache = SupabaseCache(SUPABASE_URL, "srk", client=mock_client(recorder))
        with pytest.raises(CacheWriteError):
            await cache.upsert(make_record())


class TestSupabaseStorage:
    """Test bucket uploads."""

    @pytest.mark.asyncio
    async def test_upload_returns_public_url(self):
        recorder = Recorder(httpx.Response(200, json={"Key": "instagram_profile_pictures/25025320"}))
        storage = SupabaseStorage(SUPABASE_URL + "/", "srk", client=mock_client(recorder))

        url = await storage.upload("25025320", b"img", "image/jpeg")

        assert url == f"{SUPABASE_URL}/storage/v1/object/public/instagram_profile_pictures/25025320"
        request = recorder.requests[0]
        assert request.url.path == "/storage/v1/object/instagram_profile_pictures/25025320"
        assert request.headers["x-upsert"] == "true"
        assert request.headers["content-type"] == "image/jpeg"
        assert request.content == b"img"

    @pytest.mark.asyncio
    async def test_upload_failure_is_mirror_error(self):
        recorder = Recorder(httpx.Response(400, json={"error": "Bucket not found"}))
        storage = SupabaseStorage(SUPABASE_URL, "srk", client=mock_client(recorder))
        with pytest.raises(AssetMirrorError):
            await storage.upload("1", b"img", "image/jpeg")
