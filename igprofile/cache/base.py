"""Abstract profile store interface."""

from abc import ABC, abstractmethod

from igprofile.models.profile import ProfileRecord


class ProfileCache(ABC):
    """
    Abstract base class for profile stores.

    Implementations wrap backend failures in CacheReadError / CacheWriteError
    so the service can degrade instead of failing the request.
    """

    @abstractmethod
    async def get(self, username: str) -> ProfileRecord | None:
        """
        Retrieve the stored record for a username.

        Args:
            username: Normalized Instagram username

        Returns:
            Stored ProfileRecord or None, regardless of its age
        """
        ...

    @abstractmethod
    async def upsert(self, record: ProfileRecord) -> None:
        """
        Insert or overwrite the record keyed on its id.

        Args:
            record: ProfileRecord to persist
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def __aenter__(self) -> "ProfileCache":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - cleanup."""
        await self.close()
