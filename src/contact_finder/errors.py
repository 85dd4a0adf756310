"""Custom exceptions for the contact discovery domain."""


class ContactFinderError(Exception):
    """Base exception for this project."""


class ConfigError(ContactFinderError):
    """Raised when runtime configuration or name data is invalid."""


class ProviderError(ContactFinderError):
    """Raised when a third-party provider call fails."""


class RateLimitError(ProviderError):
    """Raised when a provider throttles us; the current pass should stop."""


class QuotaExhaustedError(ProviderError):
    """Raised when a provider reports no remaining credits."""
