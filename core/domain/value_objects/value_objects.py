"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class RequestID:
    """Unique identifier for request tracing across logs and responses."""

    value: UUID

    @classmethod
    def generate(cls) -> "RequestID":
        """Generate a new RequestID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime, truncated to milliseconds."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset) and normalise."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    """
    Format as ISO-8601 UTC with millisecond precision and a `Z` suffix.

    Example: 2026-10-18T08:33:00.123Z
    """
    return ensure_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Inverse of `to_iso`; also accepts `+00:00` offsets."""
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
