"""Error hierarchy for the mission automation client.

All client-specific errors extend DealrBotError. Configuration errors are
fatal and stop the run before the scheduler starts. API errors are raised
inside the remote client only and are converted to empty results at its
public boundary, so they never reach the account processor.
"""

from __future__ import annotations


class DealrBotError(Exception):
    """Base error for all client-specific errors."""

    message: str = "Unexpected client error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(DealrBotError):
    """Invalid or missing configuration."""

    message = "Invalid configuration"


class ConfigFileError(ConfigurationError):
    """An input file could not be read."""

    message = "Input file could not be read"


class NoAccountsError(ConfigurationError):
    """The token source yielded no accounts."""

    message = "No tokens found, nothing to process"


# ---------------------------------------------------------------------------
# Remote API
# ---------------------------------------------------------------------------


class DealrApiError(DealrBotError):
    """A request to the Dealr API failed."""

    message = "Dealr API request failed"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        **kwargs: object,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, **kwargs)


class MalformedResponseError(DealrApiError):
    """The response body did not have the expected shape."""

    message = "Malformed response body"


class MissionRejectedError(DealrApiError):
    """The API answered a finish request with a non-success code."""

    message = "Mission completion rejected"

    def __init__(
        self,
        message: str | None = None,
        code: object = None,
        **kwargs: object,
    ) -> None:
        self.code = code
        super().__init__(message, **kwargs)
