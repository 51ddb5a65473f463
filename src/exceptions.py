"""Application exception hierarchy.

All custom exceptions inherit from SearchServiceError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "P2S-1000"
    CONFIGURATION_ERROR = "P2S-1001"
    VALIDATION_ERROR = "P2S-1002"

    # Embedding provider errors (3xxx)
    PROVIDER_ERROR = "P2S-3000"
    EMPTY_EMBEDDING = "P2S-3001"

    # Similarity store errors (4xxx)
    STORE_UNAVAILABLE = "P2S-4000"
    DECODE_ERROR = "P2S-4001"

    # Search errors (6xxx)
    SEARCH_FAILED = "P2S-6000"


class SearchServiceError(Exception):
    """Base exception for all search service errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(SearchServiceError):
    """Missing or invalid startup configuration."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(SearchServiceError):
    """Malformed or missing tool parameters."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class ProviderError(SearchServiceError):
    """Embedding provider call failed or returned no vector."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class StoreUnavailableError(SearchServiceError):
    """Similarity store unreachable or query rejected."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.STORE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class DecodeError(SearchServiceError):
    """Stored row does not have the expected document shape."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.DECODE_ERROR, details)


class SearchFailed(SearchServiceError):
    """User-facing failure of the search pipeline."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.SEARCH_FAILED, details)
