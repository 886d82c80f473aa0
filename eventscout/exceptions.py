"""Custom exceptions for the EventScout application."""


class EventScoutError(Exception):
    """Base exception for EventScout."""

    pass


class ValidationError(EventScoutError):
    """Exception raised for a malformed search request."""

    pass


class ConfigurationError(EventScoutError):
    """Exception raised for configuration errors."""

    pass


class ProviderUnavailable(EventScoutError):
    """Exception raised when a provider has no credential configured."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"{provider} is not configured")


class ProviderError(EventScoutError):
    """Exception raised when a configured provider fails (HTTP, timeout, payload)."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        if status_code is not None:
            super().__init__(f"{provider} error {status_code}: {message}")
        else:
            super().__init__(f"{provider} error: {message}")


class OptimizationUnavailable(EventScoutError):
    """Exception raised when the search optimizer is missing or returns unusable output."""

    pass


class PartialFailure(EventScoutError):
    """Some per-item detail fetches failed while others succeeded."""

    def __init__(self, errors: list, succeeded: int = 0):
        self.errors = errors
        self.succeeded = succeeded
        super().__init__(f"{len(errors)} item(s) failed, {succeeded} succeeded")
