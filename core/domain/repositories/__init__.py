"""Order store contract."""
from .order_repository import (
    INDEX_KEY_FIELDS,
    SCAN_KEY_FIELDS,
    OrderPage,
    OrderRepository,
)
from .pagination import InvalidPageToken, decode_page_token, encode_page_token

__all__ = [
    "INDEX_KEY_FIELDS",
    "SCAN_KEY_FIELDS",
    "InvalidPageToken",
    "OrderPage",
    "OrderRepository",
    "decode_page_token",
    "encode_page_token",
]
