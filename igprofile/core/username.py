"""Instagram username normalization and validation."""

import re

from igprofile.exceptions import InvalidUsernameError

# ASCII letters, digits, "_" and "."; not all digits; no two consecutive "_"/".";
# no leading or trailing ".".
USERNAME_PATTERN = re.compile(r"^(?![0-9]+$)(?!.*[_.]{2})(?!\.)(?!.*\.$)[a-z0-9_.]+$")


def normalize_username(username: str) -> str:
    """
    Lowercase a username and strip any leading "@" characters.

    Examples:
        "@John.Doe" -> "john.doe"
        "@@abc" -> "abc"
    """
    return username.lower().lstrip("@")


def is_valid_username(username: str) -> bool:
    """Check an already normalized username against the handle format."""
    return USERNAME_PATTERN.fullmatch(username) is not None


def clean_username(username: str) -> str:
    """
    Normalize and validate a username.

    Args:
        username: Raw username as supplied by the caller

    Returns:
        Normalized username

    Raises:
        InvalidUsernameError: If the normalized value is not a valid handle
    """
    if not isinstance(username, str):
        raise InvalidUsernameError("Username must be a string")

    normalized = normalize_username(username)
    if not is_valid_username(normalized):
        raise InvalidUsernameError(f"Invalid Instagram username: {username!r}")
    return normalized
