"""Abstract object store interface for mirrored pictures."""

from abc import ABC, abstractmethod


class AssetStore(ABC):
    """Abstract base class for picture stores."""

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """
        Store an object, overwriting any existing one under the key.

        Args:
            key: Object key within the store
            data: Object bytes
            content_type: MIME type sent with the object

        Returns:
            Public URL of the stored object

        Raises:
            AssetMirrorError: If the upload fails
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Cleanup connections and resources."""
        ...

    async def __aenter__(self) -> "AssetStore":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
