"""Custom exception hierarchy for igprofile."""


class IgProfileError(Exception):
    """Base exception for all igprofile errors."""


class InvalidUsernameError(IgProfileError):
    """Username fails the Instagram handle format."""


class ProfileNotFoundError(IgProfileError):
    """Provider has no profile for the username."""


class UpstreamError(IgProfileError):
    """Provider returned an unexpected status or could not be reached."""

    def __init__(self, message: str, status: int | None = None, reason: str | None = None):
        super().__init__(message)
        self.status = status
        self.reason = reason


class CacheError(IgProfileError):
    """Profile store operation failed."""


class CacheReadError(CacheError):
    """Reading a cached profile failed."""


class CacheWriteError(CacheError):
    """Persisting a profile failed."""


class AssetMirrorError(IgProfileError):
    """Downloading or uploading a profile picture failed."""


class ConfigError(IgProfileError):
    """Invalid configuration."""
