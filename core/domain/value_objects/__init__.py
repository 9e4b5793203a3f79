"""Domain value objects."""

from .value_objects import RequestID, ensure_utc, parse_iso, to_iso, utc_now
from .order_id import OrderId

__all__ = [
    "RequestID",
    "OrderId",
    "ensure_utc",
    "parse_iso",
    "to_iso",
    "utc_now",
]
