"""Pydantic models for igprofile."""

from igprofile.models.profile import ProfileRecord, ProviderProfile
from igprofile.models.result import LookupResult

__all__ = [
    "ProfileRecord",
    "ProviderProfile",
    "LookupResult",
]
