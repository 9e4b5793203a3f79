"""Tests for opaque pagination tokens."""

import base64
import json

import pytest

from core.domain.repositories import (
    INDEX_KEY_FIELDS,
    SCAN_KEY_FIELDS,
    InvalidPageToken,
    decode_page_token,
    encode_page_token,
)


def _b64(value) -> str:
    return base64.urlsafe_b64encode(json.dumps(value).encode()).decode()


def test_no_key_means_no_token():
    assert encode_page_token(None) is None
    assert encode_page_token({}) is None


def test_index_key_survives_encoding():
    key = {"status": "CONFIRMED", "createdAt": "2026-01-15T09:30:00.000Z", "id": "abc"}

    token = encode_page_token(key)

    assert isinstance(token, str)
    assert "{" not in token
    assert decode_page_token(token, INDEX_KEY_FIELDS) == key


def test_token_without_padding_is_accepted():
    token = _b64({"id": "abcd"}).rstrip("=")

    assert decode_page_token(token, SCAN_KEY_FIELDS) == {"id": "abcd"}


def test_extra_fields_are_dropped():
    token = _b64({"id": "abc", "other": "x"})

    assert decode_page_token(token, SCAN_KEY_FIELDS) == {"id": "abc"}


@pytest.mark.parametrize(
    "token",
    [
        "not-a-token!!",
        _b64([1, 2]),
        _b64({"status": "CONFIRMED"}),
        _b64({"status": "CONFIRMED", "createdAt": 5, "id": "abc"}),
        base64.urlsafe_b64encode(b"\xff\xfe").decode(),
    ],
)
def test_malformed_tokens_raise(token):
    with pytest.raises(InvalidPageToken):
        decode_page_token(token, INDEX_KEY_FIELDS)
