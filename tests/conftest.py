"""Shared fixtures - fake HTTP collaborators, no internet."""

from datetime import datetime, timezone

import httpx
import pytest
import structlog

from igprofile.models.profile import ProfileRecord

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
PICTURE_URL = "https://scontent.cdninstagram.test/v/t51/instagram.jpg"


def provider_payload(**overrides) -> dict:
    """HikerAPI lookup payload for the "instagram" account."""
    payload = {
        "pk": "25025320",
        "username": "instagram",
        "full_name": "Instagram",
        "biography": "Discover what's new on Instagram",
        "external_url": "https://about.instagram.com",
        "profile_pic_url": PICTURE_URL,
        "is_private": False,
        "is_verified": True,
        "is_business": True,
        "follower_count": 690000000,
    }
    payload.update(overrides)
    return payload


def make_record(**overrides) -> ProfileRecord:
    """Stored record for the "instagram" account."""
    data = {
        "id": 25025320,
        "username": "instagram",
        "full_name": "Instagram",
        "biography": "Discover what's new on Instagram",
        "external_url": "https://about.instagram.com",
        "profile_pic_url": PICTURE_URL,
        "is_private": False,
        "is_verified": True,
        "is_business": True,
        "updated_at": NOW,
    }
    data.update(overrides)
    return ProfileRecord(**data)


def mock_client(handler) -> httpx.AsyncClient:
    """httpx client whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging config pointing at streams a test has since closed."""
    yield
    structlog.reset_defaults()
