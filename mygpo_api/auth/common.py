"""Abstract class to provide authentication for requests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mygpo_api.auth.models import GPodderUserCredentials

_LOGGER = logging.getLogger(__name__)


@dataclass
class GPodderAuthClient(ABC):
    """Abstract base class for authenticating requests to gpodder.net.

    The auth client only hands out credentials for each request. It never
    stores them anywhere but in memory.
    """

    user_credentials: GPodderUserCredentials | None = None
    """(GPodderUserCredentials | None): User authentication credentials."""

    @property
    @abstractmethod
    def username(self) -> str:
        """The account name used in user-scoped endpoint paths."""
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    async def async_get_auth(self) -> str:
        """Asynchronously retrieve the authentication for the next request.

        Returns:
            str: The ``Authorization`` header value to send along with the request.

        """
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def get_credentials(self) -> dict | None:
        """Retrieve the current credentials.

        Returns:
            dict | None: A dictionary containing credentials, or None if not set.

        """
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def set_credentials(self, credentials):
        """Set new credentials.

        Args:
            credentials: The new credentials to be set.

        """
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def invalidate_credentials(self):
        """Invalidate the current credentials."""
        raise NotImplementedError  # pragma: no cover
