"""gpodder.net API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from http import HTTPStatus
import logging
import socket
from typing import TYPE_CHECKING, Any, Self, TypeVar

from aiohttp.client import ClientError, ClientSession
from aiohttp.hdrs import METH_GET, METH_POST, METH_PUT
from mashumaro.exceptions import InvalidFieldValue, MissingField
import orjson
from yarl import URL

from mygpo_api.const import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RESULT_COUNT,
    GPODDER_BASE_URL,
    GPODDER_USER_AGENT,
)
from mygpo_api.exceptions import (
    GPodderApiAuthenticationError,
    GPodderApiBadRequestError,
    GPodderApiConnectionError,
    GPodderApiConnectionTimeoutError,
    GPodderApiNotFoundError,
    GPodderApiRateLimitError,
    GPodderApiResponseError,
    GPodderApiServerError,
    GPodderApiValidationError,
)
from mygpo_api.helpers import (
    validate_count,
    validate_device_id,
    validate_since,
    validate_url,
    validate_urls,
)
from mygpo_api.models import (
    GPodderDevice,
    GPodderDeviceType,
    GPodderDeviceUpdates,
    GPodderEpisode,
    GPodderEpisodeAction,
    GPodderEpisodeActions,
    GPodderEpisodeActionType,
    GPodderPodcast,
    GPodderSubscriptionChanges,
    GPodderSuggestion,
    GPodderSyncStatus,
    GPodderTag,
    GPodderUploadResult,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mygpo_api.auth.common import GPodderAuthClient
    from mygpo_api.models import BaseDataClassORJSONMixin

T = TypeVar("T", bound="BaseDataClassORJSONMixin")

_LOGGER = logging.getLogger(__name__)


@dataclass
class GPodderClient:
    """A client for interacting with the gpodder.net API.

    Every public coroutine maps to exactly one gpodder.net endpoint and makes
    exactly one HTTP request. Nothing is retried, cached or batched; the
    server is the only source of truth.
    """

    auth_client: GPodderAuthClient | None = None
    """auth_client (GPodderAuthClient | None): The authentication client.
    Only the public directory endpoints work without one."""

    device_id: str | None = None
    """Default device id for device-scoped endpoints."""

    base_url: str = GPODDER_BASE_URL
    """Base URL of the gpodder.net (or compatible) server."""
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    """The timeout for API requests in seconds."""
    session: ClientSession | None = None
    """(ClientSession | None): The :class:`aiohttp.ClientSession` to use for API requests."""

    _close_session: bool = False

    def _ensure_session(self):
        if self.session is None:
            self.session = ClientSession()
            _LOGGER.debug("New session created.")
            self._close_session = True

    async def _request(
        self,
        uri: str,
        method: str = METH_GET,
        authenticated: bool = True,
        **kwargs,
    ) -> str | dict | list | bool | None:
        """Make a request to the gpodder.net API.

        Args:
            uri (str): The path of the API endpoint, relative to :attr:`base_url`.
            method (str): The HTTP method to use for the request.
            authenticated (bool): Send the user's credentials along with the request.
            **kwargs: Additional keyword arguments for the request.
                May include:
                - params (dict): Query parameters for the request.
                - json (dict | list): JSON data to send in the request body.
                - headers (dict): Additional headers for the request.

        Returns:
            The decoded response data, True for an empty successful response,
            or None for 204 No Content.

        Raises:
            GPodderApiAuthenticationError: Missing or rejected credentials.
            GPodderApiConnectionTimeoutError: The request timed out.
            GPodderApiConnectionError: The server could not be reached.
            GPodderApiServerError: The server answered with an error status.
            GPodderApiResponseError: The response body is not valid JSON.

        """
        url = URL(self.base_url) / uri

        headers = {
            **self.request_header,
            **kwargs.get("headers", {}),
        }
        kwargs.update({"headers": headers})
        if authenticated:
            if self.auth_client is None:
                raise GPodderApiAuthenticationError("This endpoint requires user credentials")
            headers["Authorization"] = await self.auth_client.async_get_auth()

        params = kwargs.get("params")
        if params is not None:
            kwargs.update(params={k: _query_value(v) for k, v in params.items() if v is not None})

        _LOGGER.debug(
            "Executing %s API request to %s.",
            method,
            url.with_query(kwargs.get("params")),
        )
        self._ensure_session()

        try:
            async with asyncio.timeout(self.request_timeout):
                response = await self.session.request(
                    method,
                    url,
                    **kwargs,
                )
                contents = await response.read()
        except asyncio.TimeoutError as exception:
            raise GPodderApiConnectionTimeoutError(
                "Timeout occurred while connecting to the gpodder.net API"
            ) from exception
        except (ClientError, socket.gaierror) as exception:
            raise GPodderApiConnectionError(
                "Error occurred while communicating with the gpodder.net API"
            ) from exception

        content_type = response.headers.get("Content-Type", "")
        # Error handling
        if response.status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            raise GPodderApiAuthenticationError(
                "Unauthorized access to the gpodder.net API. Please check your login credentials.",
            )
        if not HTTPStatus.OK <= response.status < HTTPStatus.MULTIPLE_CHOICES:
            message = contents.decode("utf8", errors="replace").strip() or None
            if response.status == HTTPStatus.TOO_MANY_REQUESTS:
                raise GPodderApiRateLimitError(response.status, message)
            if response.status == HTTPStatus.NOT_FOUND:
                raise GPodderApiNotFoundError(response.status, f"Resource not found: <{url}>")
            if response.status == HTTPStatus.BAD_REQUEST:
                raise GPodderApiBadRequestError(response.status, message)
            raise GPodderApiServerError(response.status, message)

        if response.status == HTTPStatus.NO_CONTENT:
            _LOGGER.warning("Request to <%s> resulted in status 204.", url)
            return None
        if not contents:
            _LOGGER.debug("Request to <%s> resulted in status %s.", url, response.status)
            return True

        if "json" in content_type:
            try:
                result = orjson.loads(contents)
            except orjson.JSONDecodeError as exception:
                raise GPodderApiResponseError(f"Invalid JSON in response from <{url}>") from exception
            _LOGGER.debug("Response: %s", str(result))
            return result
        result = contents.decode("utf8", errors="replace")
        _LOGGER.debug("Response: %s", result)
        return result

    @property
    def request_header(self) -> dict[str, str]:
        """Generate a header for HTTP requests to the server."""
        return {
            "Accept": "application/json",
            "User-Agent": GPODDER_USER_AGENT,
        }

    @property
    def username(self) -> str:
        """The username of the authenticated user."""
        if self.auth_client is None:
            raise GPodderApiAuthenticationError("This endpoint requires user credentials")
        return self.auth_client.username

    def _device(self, device_id: str | None) -> str:
        return validate_device_id(device_id if device_id is not None else self.device_id)

    @staticmethod
    def _parse(model: type[T], data: Any) -> T:
        """Decode a JSON object into ``model``, classifying failures as protocol errors."""
        if not isinstance(data, dict):
            raise GPodderApiResponseError(
                f"Expected a JSON object for {model.__name__}, got {type(data).__name__}"
            )
        try:
            return model.from_dict(data)
        except (MissingField, InvalidFieldValue, TypeError, ValueError) as err:
            raise GPodderApiResponseError(f"Unexpected {model.__name__} payload: {err}") from err

    @classmethod
    def _parse_list(cls, model: type[T], data: Any) -> list[T]:
        if not isinstance(data, list):
            raise GPodderApiResponseError(f"Expected a JSON list of {model.__name__}, got {type(data).__name__}")
        return [cls._parse(model, item) for item in data]

    @staticmethod
    def _parse_url_list(data: Any) -> list[str]:
        if not isinstance(data, list) or not all(isinstance(url, str) for url in data):
            raise GPodderApiResponseError("Expected a JSON list of URLs")
        return data

    #
    # Authentication
    #

    async def login(self) -> bool:
        """Log in, verifying the credentials.

        The server answers with a session cookie, which is kept in the
        client session for the following requests.
        """
        await self._request(f"api/2/auth/{self.username}/login.json", method=METH_POST)
        _LOGGER.debug("Logged in as <%s>", self.username)
        return True

    async def logout(self) -> bool:
        """Log out, ending the server side session."""
        await self._request(f"api/2/auth/{self.username}/logout.json", method=METH_POST)
        return True

    #
    # Subscriptions
    #

    async def get_all_subscriptions(self) -> list[GPodderPodcast]:
        """Get the podcasts the user is subscribed to on any device."""
        data = await self._request(f"subscriptions/{self.username}.json")
        return self._parse_list(GPodderPodcast, data)

    async def get_subscriptions_of_device(self, device_id: str | None = None) -> list[str]:
        """Get the feed URLs a device is subscribed to.

        Args:
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        """
        device = self._device(device_id)
        data = await self._request(f"subscriptions/{self.username}/{device}.json")
        return self._parse_url_list(data)

    async def upload_subscriptions_of_device(
        self,
        urls: Sequence[str],
        device_id: str | None = None,
    ) -> bool:
        """Replace the subscription list of a device.

        Args:
            urls (Sequence[str]): The complete list of feed URLs.
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        """
        device = self._device(device_id)
        urls = validate_urls(urls)
        await self._request(
            f"subscriptions/{self.username}/{device}.json",
            method=METH_PUT,
            json=urls,
        )
        return True

    async def upload_subscription_changes(
        self,
        add: Sequence[str] = (),
        remove: Sequence[str] = (),
        device_id: str | None = None,
    ) -> GPodderUploadResult:
        """Upload subscription changes of a device.

        Only deltas are supported; the timestamp is issued by the server.

        Args:
            add (Sequence[str]): Feed URLs to subscribe to.
            remove (Sequence[str]): Feed URLs to unsubscribe from.
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        Returns:
            GPodderUploadResult: The server timestamp and any URLs it rewrote.

        """
        device = self._device(device_id)
        add = validate_urls(add)
        remove = validate_urls(remove)
        both = set(add) & set(remove)
        if both:
            raise GPodderApiValidationError(f"URLs can't be both added and removed: {sorted(both)}")
        data = await self._request(
            f"api/2/subscriptions/{self.username}/{device}.json",
            method=METH_POST,
            json={"add": add, "remove": remove},
        )
        return self._parse(GPodderUploadResult, data)

    async def get_subscription_changes(
        self,
        since: int = 0,
        device_id: str | None = None,
    ) -> GPodderSubscriptionChanges:
        """Get the subscription changes of a device.

        Args:
            since (int): Timestamp of the last query; 0 to get everything.
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        """
        device = self._device(device_id)
        data = await self._request(
            f"api/2/subscriptions/{self.username}/{device}.json",
            params={"since": validate_since(since)},
        )
        return self._parse(GPodderSubscriptionChanges, data)

    #
    # Devices
    #

    async def list_devices(self) -> list[GPodderDevice]:
        """Get the devices registered under the user's account."""
        data = await self._request(f"api/2/devices/{self.username}.json")
        return self._parse_list(GPodderDevice, data)

    async def update_device_data(
        self,
        caption: str | None = None,
        device_type: GPodderDeviceType | str | None = None,
        device_id: str | None = None,
    ) -> bool:
        """Create or update a device. Only the given fields are changed.

        Args:
            caption (str, optional): Human readable label for the device.
            device_type (GPodderDeviceType | str, optional): The type of the device.
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        """
        device = self._device(device_id)
        if device_type is not None and not isinstance(device_type, GPodderDeviceType):
            if not isinstance(device_type, str):
                raise GPodderApiValidationError(f"Invalid device type: {device_type!r}")
            try:
                device_type = GPodderDeviceType(device_type.lower())
            except ValueError as err:
                valid_values = ", ".join([v.value for v in GPodderDeviceType])
                raise GPodderApiValidationError(
                    f"Invalid device type: {device_type}. Valid values: {valid_values}"
                ) from err
        payload = {}
        if caption is not None:
            payload["caption"] = caption
        if device_type is not None:
            payload["type"] = device_type.value
        await self._request(
            f"api/2/devices/{self.username}/{device}.json",
            method=METH_POST,
            json=payload,
        )
        return True

    async def get_device_updates(
        self,
        since: int = 0,
        include_actions: bool = False,
        device_id: str | None = None,
    ) -> GPodderDeviceUpdates:
        """Get subscription and episode updates for a device.

        Args:
            since (int): Timestamp of the last query.
            include_actions (bool): Include the latest episode action of each episode.
            device_id (str, optional): The device. Defaults to :attr:`device_id`.

        """
        device = self._device(device_id)
        data = await self._request(
            f"api/2/updates/{self.username}/{device}.json",
            params={
                "since": validate_since(since),
                "include_actions": include_actions,
            },
        )
        return self._parse(GPodderDeviceUpdates, data)

    #
    # Episode actions
    #

    async def upload_episode_actions(
        self,
        actions: Sequence[GPodderEpisodeAction | dict],
    ) -> GPodderUploadResult:
        """Upload episode actions.

        Args:
            actions (Sequence[GPodderEpisodeAction | dict]): The actions to upload.

        """
        if not actions:
            raise GPodderApiValidationError("No episode actions given")
        payload = [_validate_episode_action(action).to_dict() for action in actions]
        data = await self._request(
            f"api/2/episodes/{self.username}.json",
            method=METH_POST,
            json=payload,
        )
        return self._parse(GPodderUploadResult, data)

    async def get_episode_actions(
        self,
        podcast: str | None = None,
        device_id: str | None = None,
        since: int | None = None,
        aggregated: bool = False,
    ) -> GPodderEpisodeActions:
        """Get episode actions, optionally filtered.

        Unlike the device-scoped endpoints, no device filter is applied unless
        ``device_id`` is given explicitly.

        Args:
            podcast (str, optional): Only actions for episodes of this feed URL.
            device_id (str, optional): Only actions uploaded from this device.
            since (int, optional): Only actions since this timestamp.
            aggregated (bool): Only the latest action of each episode.

        """
        data = await self._request(
            f"api/2/episodes/{self.username}.json",
            params={
                "podcast": validate_url(podcast) if podcast is not None else None,
                "device": validate_device_id(device_id) if device_id is not None else None,
                "since": validate_since(since) if since is not None else None,
                "aggregated": True if aggregated else None,
            },
        )
        return self._parse(GPodderEpisodeActions, data)

    #
    # Suggestions
    #

    async def get_suggestions(self, max_results: int = DEFAULT_RESULT_COUNT) -> list[GPodderSuggestion]:
        """Get podcasts suggested from the user's subscriptions.

        Args:
            max_results (int): Maximum number of suggestions (1-100).

        """
        max_results = validate_count(max_results, "max_results")
        data = await self._request(f"suggestions/{max_results}.json")
        return self._parse_list(GPodderSuggestion, data)

    #
    # Directory
    #

    async def get_top_tags(self, count: int = DEFAULT_RESULT_COUNT) -> list[GPodderTag]:
        """Get the most used podcast tags."""
        count = validate_count(count)
        data = await self._request(f"api/2/tags/{count}.json", authenticated=False)
        return self._parse_list(GPodderTag, data)

    async def get_podcasts_for_tag(self, tag: str, count: int = DEFAULT_RESULT_COUNT) -> list[GPodderPodcast]:
        """Get the most subscribed podcasts with a tag.

        Args:
            tag (str): The tag, as in :attr:`GPodderTag.tag`.
            count (int): Maximum number of podcasts (1-100).

        """
        if not tag or "/" in tag:
            raise GPodderApiValidationError(f"Invalid tag: {tag!r}")
        count = validate_count(count)
        data = await self._request(f"api/2/tag/{tag}/{count}.json", authenticated=False)
        return self._parse_list(GPodderPodcast, data)

    async def get_podcast_data(self, url: str) -> GPodderPodcast:
        """Get the directory entry of a podcast by its feed URL."""
        data = await self._request(
            "api/2/data/podcast.json",
            params={"url": validate_url(url)},
            authenticated=False,
        )
        return self._parse(GPodderPodcast, data)

    async def get_episode_data(self, podcast_url: str, episode_url: str) -> GPodderEpisode:
        """Get the directory entry of an episode.

        Args:
            podcast_url (str): Feed URL of the podcast.
            episode_url (str): Media URL of the episode.

        """
        data = await self._request(
            "api/2/data/episode.json",
            params={
                "podcast": validate_url(podcast_url),
                "url": validate_url(episode_url),
            },
            authenticated=False,
        )
        return self._parse(GPodderEpisode, data)

    async def get_toplist(self, count: int = DEFAULT_RESULT_COUNT) -> list[GPodderPodcast]:
        """Get the most subscribed podcasts."""
        count = validate_count(count)
        data = await self._request(f"toplist/{count}.json", authenticated=False)
        return self._parse_list(GPodderPodcast, data)

    async def search_podcasts(self, query: str) -> list[GPodderPodcast]:
        """Search the podcast directory.

        Args:
            query (str): The search query.

        """
        if not query or not query.strip():
            raise GPodderApiValidationError("Search query can't be empty")
        data = await self._request("search.json", params={"q": query}, authenticated=False)
        return self._parse_list(GPodderPodcast, data)

    #
    # Favorites
    #

    async def get_favorite_episodes(self) -> list[GPodderEpisode]:
        """Get the episodes the user marked as favorites."""
        data = await self._request(f"api/2/favorites/{self.username}.json")
        return self._parse_list(GPodderEpisode, data)

    #
    # Device synchronization
    #

    async def get_sync_status(self) -> GPodderSyncStatus:
        """Get which devices are synchronized with each other."""
        data = await self._request(f"api/2/sync-devices/{self.username}.json")
        return self._parse(GPodderSyncStatus, data)

    async def update_sync_status(
        self,
        synchronize: Sequence[Sequence[str]] = (),
        stop_synchronize: Sequence[str] = (),
    ) -> GPodderSyncStatus:
        """Start or stop synchronizing devices.

        Args:
            synchronize (Sequence[Sequence[str]]): Groups of device ids to synchronize with each other.
            stop_synchronize (Sequence[str]): Device ids to stop synchronizing.

        Returns:
            GPodderSyncStatus: The synchronization status after the update.

        """
        groups = []
        for group in synchronize:
            if isinstance(group, str) or len(group) < 2:
                raise GPodderApiValidationError("Each group to synchronize needs at least two device ids")
            groups.append([validate_device_id(device) for device in group])
        stop = [validate_device_id(device) for device in stop_synchronize]
        data = await self._request(
            f"api/2/sync-devices/{self.username}.json",
            method=METH_POST,
            json={"synchronize": groups, "stop-synchronize": stop},
        )
        return self._parse(GPodderSyncStatus, data)

    async def close(self) -> None:
        """Close open client session."""
        if self.session and self._close_session:
            await self.session.close()

    async def __aenter__(self) -> Self:
        """Async enter."""
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        """Async exit."""
        await self.close()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _validate_episode_action(action: GPodderEpisodeAction | dict) -> GPodderEpisodeAction:
    """Check an episode action before it is uploaded."""
    if isinstance(action, dict):
        try:
            action = GPodderEpisodeAction.from_dict(action)
        except (MissingField, InvalidFieldValue, TypeError, ValueError) as err:
            raise GPodderApiValidationError(f"Invalid episode action: {err}") from err
    elif not isinstance(action, GPodderEpisodeAction):
        raise GPodderApiValidationError(f"Invalid episode action: {action!r}")
    validate_url(action.podcast)
    validate_url(action.episode)
    if action.device is not None:
        validate_device_id(action.device)
    play_fields = {"started": action.started, "position": action.position, "total": action.total}
    for name, value in play_fields.items():
        if value is None:
            continue
        if action.action != GPodderEpisodeActionType.PLAY:
            raise GPodderApiValidationError(f"{name} is only valid for play actions")
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise GPodderApiValidationError(f"{name} must be a non-negative integer")
    return action
