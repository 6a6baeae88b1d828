"""Profile picture object stores."""

from igprofile.assets.base import AssetStore
from igprofile.assets.local_storage import LocalAssetStore
from igprofile.assets.supabase_storage import SupabaseStorage

__all__ = ["AssetStore", "LocalAssetStore", "SupabaseStorage"]
