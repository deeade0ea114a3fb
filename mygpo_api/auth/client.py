from __future__ import annotations

from dataclasses import asdict, dataclass
import logging

from aiohttp import encode_basic_auth

from mygpo_api.auth.common import GPodderAuthClient
from mygpo_api.auth.models import GPodderUserCredentials
from mygpo_api.exceptions import GPodderApiAuthenticationError

_LOGGER = logging.getLogger(__name__)


@dataclass
class GPodderDefaultAuthClient(GPodderAuthClient):
    """Default authentication client for gpodder.net.

    gpodder.net authenticates every request with HTTP Basic auth, so this
    client simply turns the user's credentials into an ``Authorization`` header.
    """

    def __post_init__(self):
        """Initialize the client after dataclass initialization."""
        if self.user_credentials is not None:
            self.set_credentials(self.user_credentials)

    def _checked_credentials(self) -> GPodderUserCredentials:
        credentials = self.user_credentials
        if credentials is None:
            raise GPodderApiAuthenticationError("No user credentials provided")
        username = credentials.username
        # The username ends up in the URL path and in the Basic auth header.
        if not username or "/" in username or ":" in username:
            raise GPodderApiAuthenticationError(f"Malformed username: {username!r}")
        if credentials.password is None:
            raise GPodderApiAuthenticationError("No password provided")
        try:
            f"{username}:{credentials.password}".encode()
        except UnicodeEncodeError as err:
            raise GPodderApiAuthenticationError("Credentials can't be encoded as UTF-8") from err
        return credentials

    @property
    def username(self) -> str:
        return self._checked_credentials().username

    async def async_get_auth(self) -> str:
        """Get the ``Authorization`` header value for the next request.

        Credentials are encoded as UTF-8.

        Raises:
            GPodderApiAuthenticationError: If no, or malformed, user credentials are provided.

        """
        credentials = self._checked_credentials()
        return encode_basic_auth(credentials.username, credentials.password)

    def get_credentials(self) -> dict | None:
        """Get the current credentials as a dictionary, or None if not set."""
        if self.user_credentials is not None:
            return asdict(self.user_credentials)
        return None

    def set_credentials(self, credentials: GPodderUserCredentials | dict):
        """Set the credentials.

        Args:
            credentials (GPodderUserCredentials | dict): The credentials to set.

        """
        if isinstance(credentials, dict):
            credentials = GPodderUserCredentials(
                username=credentials["username"],
                password=credentials["password"],
            )
        self.user_credentials = credentials
        _LOGGER.debug("Credentials set for user <%s>", credentials.username)

    def invalidate_credentials(self):
        """Invalidate the current credentials."""
        self.user_credentials = None
