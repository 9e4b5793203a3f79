"""
Pagination tokens.

A token is an opaque, versionless blob: URL-safe base64 over the JSON of a
store's resume key. Tokens are only meaningful to the store that issued
them.
"""
import base64
import binascii
import json
from typing import Dict, Optional, Sequence


class InvalidPageToken(ValueError):
    """Token could not be decoded into a resume key."""


def encode_page_token(key: Optional[Dict[str, str]]) -> Optional[str]:
    if not key:
        return None
    raw = json.dumps(key, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_page_token(token: str, required: Sequence[str]) -> Dict[str, str]:
    """
    Decode a token and check that it carries every field in `required`.

    Raises:
        InvalidPageToken: on any decoding or shape problem.
    """
    try:
        padded = token + "=" * (-len(token) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        key = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidPageToken(f"Undecodable pagination token: {e}") from e

    if not isinstance(key, dict):
        raise InvalidPageToken("Pagination token must encode an object")

    missing = [name for name in required if not isinstance(key.get(name), str)]
    if missing:
        raise InvalidPageToken(f"Pagination token missing fields: {missing}")

    return {name: key[name] for name in required}
