"""Lookup result wrapper model."""

from pydantic import BaseModel

from igprofile.models.profile import ProfileRecord


class LookupResult(BaseModel):
    """Outcome of a single profile lookup."""

    profile: ProfileRecord
    cached: bool = False
    cache_error: str | None = None
