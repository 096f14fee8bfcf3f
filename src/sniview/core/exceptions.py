"""
Custom exceptions for sniview.
"""

__all__ = [
    "SniviewError",
    "ConfigurationError",
    "TransportError",
    "BackendError",
    "StorageError",
    "InvalidSelectionError",
]


class SniviewError(Exception):
    """Base exception for all sniview errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigurationError(SniviewError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None):
        details = {}
        if config_key is not None:
            details["config_key"] = config_key
        super().__init__(message, details)
        self.config_key = config_key


class TransportError(SniviewError):
    """Raised when an event stream cannot be opened or read."""

    def __init__(self, message: str, source: str | None = None):
        details = {}
        if source is not None:
            details["source"] = source
        super().__init__(message, details)
        self.source = source


class BackendError(SniviewError):
    """
    Raised when a rule or set mutation is rejected by the appliance.

    ``message`` holds the backend's own message when the response body is
    structured JSON, otherwise the stringified body or transport error.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: object = None,
    ):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return self.message


class StorageError(SniviewError):
    """Raised by storage adapters; callers log it instead of propagating."""

    def __init__(self, message: str, path: str | None = None):
        details = {}
        if path is not None:
            details["path"] = path
        super().__init__(message, details)
        self.path = path


class InvalidSelectionError(SniviewError):
    """Raised when a rule insertion is attempted without a usable target set."""
