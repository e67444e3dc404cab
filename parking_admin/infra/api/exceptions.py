"""Backend API client exceptions.

Strongly-typed exceptions for the parking backend client. Maps low-level
network/HTTP errors to exceptions that carry the HTTP status code and the
message the server supplied (if any).

Exception hierarchy:
- ApiError (base)
  - ApiConnectionError (network/timeout, no status code)
    - ApiTimeoutError
    - ApiNetworkError
  - ApiClientError (4xx responses)
    - ApiAuthenticationError (401)
    - ApiAuthorizationError (403)
    - ApiNotFoundError (404)
    - ApiValidationError (400, 422)
  - ApiServerError (5xx responses)
  - ApiResponseError (2xx response whose body is not JSON)
"""


class ApiError(Exception):
    """Base exception for all backend API errors.

    Attributes:
        status_code: HTTP status code, or None when no response arrived
        server_message: Error message supplied by the server, if any
    """

    status_code: int | None = None

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.server_message = server_message


# Connection errors
class ApiConnectionError(ApiError):
    """Base exception for connection/network failures."""

    pass


class ApiTimeoutError(ApiConnectionError):
    """Raised when a request times out."""

    pass


class ApiNetworkError(ApiConnectionError):
    """Raised for network connectivity issues (DNS, TCP connection, etc)."""

    pass


# Client errors (4xx)
class ApiClientError(ApiError):
    """Base exception for client errors (HTTP 4xx)."""

    def __init__(self, message: str, status_code: int, server_message: str | None = None):
        super().__init__(message, status_code, server_message)


class ApiAuthenticationError(ApiClientError):
    """Raised when the session token is missing or expired (HTTP 401)."""

    def __init__(self, message: str = "Authentication failed", server_message: str | None = None):
        super().__init__(message, 401, server_message)


class ApiAuthorizationError(ApiClientError):
    """Raised when the caller lacks admin privileges (HTTP 403)."""

    def __init__(self, message: str = "Authorization denied", server_message: str | None = None):
        super().__init__(message, 403, server_message)


class ApiNotFoundError(ApiClientError):
    """Raised when the slot request does not exist (HTTP 404)."""

    def __init__(self, message: str = "Resource not found", server_message: str | None = None):
        super().__init__(message, 404, server_message)


class ApiValidationError(ApiClientError):
    """Raised for validation errors (HTTP 400, 422)."""

    def __init__(self, message: str, status_code: int = 400, server_message: str | None = None):
        super().__init__(message, status_code, server_message)


# Server errors (5xx)
class ApiServerError(ApiError):
    """Raised for server errors (HTTP 5xx)."""

    def __init__(self, message: str, status_code: int, server_message: str | None = None):
        super().__init__(message, status_code, server_message)


class ApiResponseError(ApiError):
    """Raised when a successful response carries a body that is not JSON."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code)
