"""Export utilities for lookup results."""

import json
from pathlib import Path

from igprofile.models.result import LookupResult


def to_response(result: LookupResult) -> dict:
    """
    Flatten a LookupResult into the HTTP response body.

    The record fields sit at the top level next to "cached". Fresh fetches
    also carry "cacheError", null unless persisting the record failed.

    Args:
        result: LookupResult to convert

    Returns:
        JSON-ready dictionary
    """
    body = result.profile.model_dump(mode="json")
    body["cached"] = result.cached
    if not result.cached:
        body["cacheError"] = result.cache_error
    return body


def to_json(result: LookupResult, indent: int = 2) -> str:
    """
    Convert LookupResult to the response body as a JSON string.

    Args:
        result: LookupResult to serialize
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return json.dumps(to_response(result), indent=indent, ensure_ascii=False)


def to_dict(result: LookupResult) -> dict:
    """
    Convert LookupResult to a dictionary mirroring the model.

    Args:
        result: LookupResult to convert

    Returns:
        Dictionary representation
    """
    return result.model_dump(mode="json")


def save_json(
    result: LookupResult,
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save LookupResult to JSON file.

    Args:
        result: LookupResult to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.model_dump_json(indent=indent), encoding="utf-8")
    return path


def load_json(filepath: str | Path) -> LookupResult:
    """
    Load LookupResult from JSON file.

    Args:
        filepath: Path to JSON file

    Returns:
        LookupResult instance
    """
    path = Path(filepath)
    return LookupResult.model_validate_json(path.read_text(encoding="utf-8"))
