"""
JSON encoder/decoder for the wire format.

Outbound messages are compact JSON objects. Inbound frames are size-checked
before parsing and must decode to a JSON object.
"""

import json
from typing import Any


class DecodeError(Exception):
    """Error raised when an inbound frame cannot be decoded."""


# Size limit to prevent resource exhaustion from malicious payloads.
MAX_FRAME_LEN = 16 * 1024  # 16KB; the largest legitimate request is well under 100 bytes


def encode(data: dict[str, Any]) -> str:
    """
    Encode a dict to a compact JSON string.
    """
    return json.dumps(data, separators=(",", ":"))


def decode(data: str | bytes) -> dict[str, Any]:
    """
    Decode a JSON frame to a dict.

    Raises DecodeError if data is invalid, not an object, or exceeds the size limit.
    """
    if len(data) > MAX_FRAME_LEN:
        raise DecodeError(f"payload too large: {len(data)} bytes (max {MAX_FRAME_LEN})")
    try:
        result = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"failed to decode JSON data: {e}") from e

    if not isinstance(result, dict):
        raise DecodeError(f"expected object, got {type(result).__name__}")

    return result
