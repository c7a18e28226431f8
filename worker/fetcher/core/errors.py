"""Exceptions raised by the listings fetch worker."""

from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised when mandatory configuration is missing or invalid."""


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class ProviderTransientError(GooglePlacesError):
    """Rate limited, denied or unknown provider error; worth another attempt."""


class ProviderFatalError(GooglePlacesError):
    """A provider call that failed for good, either outright or after retries ran out."""
