"""Profile data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProviderProfile(BaseModel):
    """Profile payload as returned by the HikerAPI lookup endpoint."""

    model_config = ConfigDict(extra="ignore")

    pk: int
    username: str
    full_name: str | None = None
    biography: str | None = None
    external_url: str | None = None
    profile_pic_url: str | None = None
    is_private: bool = False
    is_verified: bool = False
    is_business: bool = False


class ProfileRecord(BaseModel):
    """Normalized Instagram profile as stored and returned."""

    id: int
    username: str
    full_name: str | None = None
    biography: str | None = None
    external_url: str | None = None
    profile_pic_url: str | None = None
    is_private: bool = False
    is_verified: bool = False
    is_business: bool = False
    updated_at: datetime

    @classmethod
    def from_provider(
        cls,
        profile: ProviderProfile,
        username: str,
        updated_at: datetime,
    ) -> "ProfileRecord":
        """
        Build a record from a provider payload.

        Args:
            profile: Payload returned by the provider
            username: Normalized username the lookup was made with
            updated_at: Refresh timestamp

        Returns:
            ProfileRecord keyed on the provider's numeric id
        """
        return cls(
            id=profile.pk,
            username=username,
            full_name=profile.full_name,
            biography=profile.biography,
            external_url=profile.external_url,
            profile_pic_url=profile.profile_pic_url,
            is_private=profile.is_private,
            is_verified=profile.is_verified,
            is_business=profile.is_business,
            updated_at=updated_at,
        )
