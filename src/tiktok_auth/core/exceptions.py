# core/exceptions.py

from typing import Any


class TikTokAuthException(Exception):
    def __init__(
        self, message: str, error_code: str | None = None, details: dict[str, Any] | None = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(TikTokAuthException):
    def __init__(self, message: str = "Invalid strategy configuration"):
        super().__init__(message, error_code="CONFIGURATION_ERROR")


class AuthenticationError(TikTokAuthException):
    pass


class TransportError(AuthenticationError):
    """The authenticated call to a provider endpoint failed."""

    def __init__(
        self, message: str = "Failed to fetch user profile", cause: Exception | None = None
    ):
        details = {"cause": str(cause)} if cause is not None else None
        super().__init__(message, error_code="TRANSPORT_ERROR", details=details)
        self.cause = cause


class MalformedResponseError(AuthenticationError):
    def __init__(self, message: str = "Failed to parse user profile"):
        super().__init__(message, error_code="MALFORMED_RESPONSE")


class InvalidProfileError(AuthenticationError):
    def __init__(
        self, message: str = "Invalid profile response", details: dict[str, Any] | None = None
    ):
        super().__init__(message, error_code="INVALID_PROFILE", details=details)
