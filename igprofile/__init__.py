"""igprofile - cached Instagram profile lookups."""

from igprofile.models.profile import ProfileRecord, ProviderProfile
from igprofile.models.result import LookupResult
from igprofile.config import ServiceConfig
from igprofile.core.service import ProfileLookupService
from igprofile.core.username import clean_username, normalize_username
from igprofile.core.exporter import to_json, to_dict, to_response, save_json, load_json

__version__ = "0.1.0"

__all__ = [
    # Main interface
    "ProfileLookupService",
    "ServiceConfig",
    "clean_username",
    "normalize_username",
    # Models
    "ProfileRecord",
    "ProviderProfile",
    "LookupResult",
    # Export utilities
    "to_json",
    "to_dict",
    "to_response",
    "save_json",
    "load_json",
    "__version__",
]
