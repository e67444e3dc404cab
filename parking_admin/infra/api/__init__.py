"""Parking backend integration.

- client: async REST client for slot request endpoints
- exceptions: strongly-typed error handling
"""

from parking_admin.infra.api.client import SlotRequestApiClient
from parking_admin.infra.api.exceptions import (
    ApiAuthenticationError,
    ApiAuthorizationError,
    ApiClientError,
    ApiConnectionError,
    ApiError,
    ApiNetworkError,
    ApiNotFoundError,
    ApiResponseError,
    ApiServerError,
    ApiTimeoutError,
    ApiValidationError,
)

__all__ = [
    # Client
    "SlotRequestApiClient",
    # Exceptions
    "ApiError",
    "ApiConnectionError",
    "ApiTimeoutError",
    "ApiNetworkError",
    "ApiClientError",
    "ApiAuthenticationError",
    "ApiAuthorizationError",
    "ApiNotFoundError",
    "ApiValidationError",
    "ApiServerError",
    "ApiResponseError",
]
