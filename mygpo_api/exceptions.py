"""mygpo_api exceptions."""

from __future__ import annotations


class GPodderApiError(Exception):
    """Generic gpodder.net exception."""


class GPodderApiValidationError(GPodderApiError, ValueError):
    """Invalid parameters, detected before anything is sent."""


class GPodderApiConnectionError(GPodderApiError):
    """gpodder.net connection exception."""


class GPodderApiConnectionTimeoutError(GPodderApiConnectionError):
    """gpodder.net connection timeout exception."""


class GPodderApiAuthenticationError(GPodderApiError):
    """gpodder.net authentication exception."""


class GPodderApiResponseError(GPodderApiError):
    """Malformed or unexpected response payload."""


class GPodderApiServerError(GPodderApiError):
    """gpodder.net answered with an error status."""

    def __init__(self, status: int, message: str | None = None):
        super().__init__(status, message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return f"HTTP {self.status}: {self.message}"
        return f"HTTP {self.status}"


class GPodderApiBadRequestError(GPodderApiServerError):
    """gpodder.net bad request exception."""


class GPodderApiNotFoundError(GPodderApiServerError):
    """gpodder.net not found exception."""


class GPodderApiRateLimitError(GPodderApiServerError):
    """gpodder.net rate limit exception."""
