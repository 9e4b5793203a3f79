"""Order identifier value object."""
import re
from dataclasses import dataclass
from uuid import uuid4

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class OrderId:
    """
    Opaque order identifier.

    Generated as a random UUID at creation time. Lookups accept any RFC 4122
    UUID of versions 1-5 so that a malformed id can be told apart from one
    that is well-formed but unknown.

    Examples:
    - 3f0b8c4e-6a1d-4f2e-9b7a-2c5d8e1f0a93
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order ID cannot be empty")

        if not isinstance(self.value, str) or not _UUID_PATTERN.match(self.value):
            raise ValueError(f"Invalid order ID format: {self.value}")

    @classmethod
    def generate(cls) -> "OrderId":
        """Generate a fresh random identifier."""
        return cls(value=str(uuid4()))

    @classmethod
    def is_valid(cls, value: object) -> bool:
        return isinstance(value, str) and bool(_UUID_PATTERN.match(value))

    def __str__(self) -> str:
        return self.value
