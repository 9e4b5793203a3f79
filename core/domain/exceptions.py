"""
Domain exceptions.

Every failure that can reach a caller is one of these. Each class carries
the HTTP status it maps to and the short error label used in response
bodies, so the API layer never has to guess.
"""
from typing import Any, Dict, List, Optional


class OrderServiceError(Exception):
    """Base class for all order service errors."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the `{error, message}` response body."""
        return {"error": self.error, "message": self.message}


class ValidationError(OrderServiceError):
    """
    Client input is malformed.

    Holds every violation found, not just the first one.
    """

    status_code = 400
    error = "Validation failed"

    def __init__(self, errors: List[str], error: Optional[str] = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))
        if error:
            self.error = error

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if len(self.errors) > 1:
            body["errors"] = self.errors
        return body


class ConflictError(OrderServiceError):
    """An order with the same id already exists."""

    status_code = 409
    error = "Conflict"


class NotFoundError(OrderServiceError):
    """The requested order does not exist."""

    status_code = 404
    error = "Not Found"


class ThrottlingError(OrderServiceError):
    """The backing store is overloaded; the caller should retry shortly."""

    status_code = 429
    error = "Too Many Requests"

    def __init__(
        self,
        message: str = "Database is currently busy. Please try again in a moment.",
        retry_after: int = 1,
    ):
        super().__init__(message)
        self.retry_after = retry_after


class InternalError(OrderServiceError):
    """Unexpected fault. Logged with full context, never shown verbatim."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        message: str = "An unexpected error occurred while processing your request",
    ):
        super().__init__(message)


class StatusPreconditionFailed(ConflictError):
    """The order exists but is no longer in the status the update required."""

    def __init__(self, order_id: str, expected: str, actual: str):
        super().__init__(
            f"Order {order_id} is {actual}, expected {expected}"
        )
        self.order_id = order_id
        self.expected = expected
        self.actual = actual


class MalformedMessageError(ValueError):
    """An event message cannot be understood. Never worth retrying."""
