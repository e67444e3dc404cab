"""Domain-specific exceptions for the slot request admin tool.

Domain exceptions represent input that is rejected locally, before any
network call is made. They are separate from the API client exceptions
and are handled inside the request-list controller, which surfaces them
as notifications.
"""


class DomainError(Exception):
    """Base exception for domain layer errors."""

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message
            context: Additional context about the error
        """
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when admin input fails local validation."""

    pass


class InvalidSearchQueryError(ValidationError):
    """Raised when a non-empty search query is rejected by the sanitizer.

    Context includes:
        - query: The raw query as typed
        - sanitized: The sanitizer's cleaned value
    """

    def __init__(self, query: str, sanitized: str) -> None:
        super().__init__(
            "Invalid search query",
            context={"query": query, "sanitized": sanitized},
        )


class RejectionReasonTooLongError(ValidationError):
    """Raised when the cleaned rejection reason exceeds the allowed length.

    Context includes:
        - length: Length of the cleaned reason
        - max_length: Configured maximum
    """

    def __init__(self, length: int, max_length: int) -> None:
        super().__init__(
            f"Rejection reason is too long (max {max_length} characters)",
            context={"length": length, "max_length": max_length},
        )
