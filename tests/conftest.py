from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING

import pytest

from mygpo_api.auth import GPodderDefaultAuthClient
from mygpo_api.auth.models import GPodderUserCredentials
from mygpo_api.client import GPodderClient
from mygpo_api.const import ENV_DEVICE_ID, ENV_PASSWORD, ENV_USERNAME

from .helpers import load_fixture_json

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

_LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.DEBUG)


def pytest_addoption(parser):
    """Add command-line option to update the public directory fixtures from gpodder.net."""
    parser.addoption(
        "--update-fixtures",
        action="store_true",
        default=False,
        help="Update JSON fixtures of the public directory endpoints from the live API",
    )


@pytest.fixture(scope="session")
def update_fixtures(pytestconfig):  # pragma: no cover
    """Session-wide flag to indicate fixtures should be updated from live API."""
    return pytestconfig.getoption("update_fixtures")


@pytest.fixture
def mock_credentials():
    return load_fixture_json("mock_credentials")


@pytest.fixture
def user_credentials(mock_credentials):
    return GPodderUserCredentials(
        username=mock_credentials["username"],
        password=mock_credentials["password"],
    )


@pytest.fixture
def device_id(mock_credentials):
    return mock_credentials["device_id"]


@pytest.fixture
async def gpodder_client(user_credentials, device_id):
    """Return GPodderClient."""

    @contextlib.asynccontextmanager
    async def _gpodder_client(
        credentials: GPodderUserCredentials | dict | None = None,
        load_default_credentials: bool = True,
        load_default_device: bool = True,
        **kwargs,
    ) -> AsyncGenerator[GPodderClient, None]:
        auth_client = GPodderDefaultAuthClient()
        if credentials is not None:
            auth_client.set_credentials(credentials)
        elif load_default_credentials:
            auth_client.set_credentials(user_credentials)
        if load_default_device:
            kwargs.setdefault("device_id", device_id)
        client = GPodderClient(auth_client=auth_client, **kwargs)
        try:
            await client.__aenter__()
            yield client
        finally:
            await client.__aexit__(None, None, None)

    return _gpodder_client


@pytest.fixture
async def live_gpodder_client():  # pragma: no cover
    """Return a GPodderClient for the account given in the environment."""
    missing = [v for v in (ENV_USERNAME, ENV_PASSWORD, ENV_DEVICE_ID) if not os.getenv(v)]
    if missing:
        pytest.skip(f"Live tests require environment variables: {', '.join(missing)}")
    credentials = GPodderUserCredentials(os.environ[ENV_USERNAME], os.environ[ENV_PASSWORD])
    async with GPodderClient(
        auth_client=GPodderDefaultAuthClient(user_credentials=credentials),
        device_id=os.environ[ENV_DEVICE_ID],
    ) as client:
        yield client


def pytest_configure(config):  # pragma: no cover
    if config.getoption("update_fixtures"):
        # Disable HTTP mocking to allow real API requests for fixture updates
        pm = config.pluginmanager
        with contextlib.suppress(Exception):
            pm.set_blocked("aresponses")
        plugin = pm.get_plugin("aresponses")
        if plugin:
            pm.unregister(plugin)

        import asyncio

        from .helpers import save_fixture

        # noinspection PyProtectedMember
        async def _update_fixtures():
            async with GPodderClient() as client:
                # get_toplist()
                toplist = await client._request("toplist/2.json", authenticated=False)
                save_fixture("toplist", toplist)

                # get_top_tags()
                tags = await client._request("api/2/tags/3.json", authenticated=False)
                save_fixture("api-2-tags", tags)

                # get_podcast_data()
                podcast = await client._request(
                    "api/2/data/podcast.json",
                    params={"url": "http://feeds.feedburner.com/linuxoutlaws"},
                    authenticated=False,
                )
                save_fixture("api-2-data-podcast", podcast)

        asyncio.run(_update_fixtures())
        pytest.exit("Fixtures updated", returncode=0)
