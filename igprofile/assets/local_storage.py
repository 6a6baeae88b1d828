"""Filesystem picture store for local development."""

from pathlib import Path

from igprofile.assets.base import AssetStore
from igprofile.exceptions import AssetMirrorError


class LocalAssetStore(AssetStore):
    """Writes pictures into a directory served from base_url."""

    def __init__(self, directory: str, base_url: str):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        path = self.directory / key
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise AssetMirrorError(f"Could not write {path}: {e}") from e
        return f"{self.base_url}/{key}"

    async def close(self) -> None:
        pass
