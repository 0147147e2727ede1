"""Validation helpers for service settings."""

import json


def _require_items(items: list[str], *, allow_empty: bool) -> list[str]:
    if not allow_empty and not items:
        raise ValueError("String list value must not be empty")
    return items


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a string list from an environment variable or config value.

    Accepts a list of strings (returned as-is), a JSON array string such as
    '["a","b"]', or a comma-separated string such as 'a,b'.

    Raises ValueError for blank strings and malformed JSON. Unless
    allow_empty is set, an empty resulting list is rejected too.
    """
    if isinstance(value, list):
        return _require_items(value, allow_empty=allow_empty)

    stripped = value.strip()
    if not stripped:
        raise ValueError("String list value must not be empty")

    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON array: {e}") from e
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            raise ValueError("JSON value must be an array of strings")
        return _require_items(parsed, allow_empty=allow_empty)

    items = [item.strip() for item in stripped.split(",") if item.strip()]
    return _require_items(items, allow_empty=allow_empty)
