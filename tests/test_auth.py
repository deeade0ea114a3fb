"""Tests for GPodderDefaultAuthClient."""

from __future__ import annotations

import base64
import logging

from aiohttp import encode_basic_auth
from aiohttp.web_response import json_response
from aresponses import ResponsesMockServer
import pytest

from mygpo_api import GPodderClient, GPodderDefaultAuthClient, GPodderUserCredentials
from mygpo_api.exceptions import GPodderApiAuthenticationError

from .helpers import GPODDER_HOST

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.DEBUG)


async def test_async_get_auth_with_valid_credentials(user_credentials):
    auth_client = GPodderDefaultAuthClient(user_credentials=user_credentials)
    auth = await auth_client.async_get_auth()
    assert auth == encode_basic_auth(user_credentials.username, user_credentials.password)
    assert auth_client.username == user_credentials.username


async def test_async_get_auth_without_credentials(gpodder_client):
    async with gpodder_client(load_default_credentials=False) as client:
        client: GPodderClient
        with pytest.raises(GPodderApiAuthenticationError):
            await client.auth_client.async_get_auth()
        with pytest.raises(GPodderApiAuthenticationError):
            assert client.username


@pytest.mark.parametrize(
    "username",
    [
        "",
        "foo/bar",
        "foo:bar",
    ],
)
async def test_malformed_username(aresponses: ResponsesMockServer, gpodder_client, username):
    credentials = GPodderUserCredentials(username=username, password="secret")
    async with gpodder_client(credentials=credentials) as client:
        client: GPodderClient
        with pytest.raises(GPodderApiAuthenticationError):
            await client.list_devices()
        with pytest.raises(GPodderApiAuthenticationError):
            await client.get_subscriptions_of_device()
    assert aresponses.history == []


async def test_set_credentials_from_dict(mock_credentials):
    auth_client = GPodderDefaultAuthClient()
    assert auth_client.get_credentials() is None

    auth_client.set_credentials(mock_credentials)
    assert auth_client.get_credentials() == {
        "username": mock_credentials["username"],
        "password": mock_credentials["password"],
    }
    assert auth_client.username == mock_credentials["username"]


async def test_invalidate_credentials(user_credentials):
    auth_client = GPodderDefaultAuthClient(user_credentials=user_credentials)
    auth_client.invalidate_credentials()
    assert auth_client.get_credentials() is None
    with pytest.raises(GPodderApiAuthenticationError):
        await auth_client.async_get_auth()


def test_credentials_repr_hides_password(user_credentials):
    assert user_credentials.password not in repr(user_credentials)
    assert user_credentials.username in repr(user_credentials)


@pytest.mark.parametrize(
    ("username", "password"),
    [
        ("alice", "pa€ss"),
        ("bö€b", "secret"),
    ],
)
async def test_async_get_auth_encodes_utf8(username, password):
    auth_client = GPodderDefaultAuthClient(user_credentials=GPodderUserCredentials(username, password))
    auth = await auth_client.async_get_auth()
    assert auth == "Basic " + base64.b64encode(f"{username}:{password}".encode()).decode()


async def test_non_latin1_password_is_sent(aresponses: ResponsesMockServer):
    captured = []

    async def handler(request):
        captured.append(request.headers.get("Authorization"))
        return json_response(data=[])

    aresponses.add(GPODDER_HOST, "/api/2/devices/alice.json", "GET", handler)
    credentials = GPodderUserCredentials(username="alice", password="pa€ss")
    async with GPodderClient(auth_client=GPodderDefaultAuthClient(user_credentials=credentials)) as client:
        assert await client.list_devices() == []
    assert captured == ["Basic " + base64.b64encode("alice:pa€ss".encode()).decode()]


@pytest.mark.parametrize(
    ("username", "password"),
    [
        ("alice", "pa\udc80ss"),
        ("b\ud800b", "secret"),
    ],
)
async def test_unencodable_credentials(aresponses: ResponsesMockServer, username, password):
    credentials = GPodderUserCredentials(username=username, password=password)
    async with GPodderClient(auth_client=GPodderDefaultAuthClient(user_credentials=credentials)) as client:
        with pytest.raises(GPodderApiAuthenticationError):
            await client.list_devices()
    assert aresponses.history == []
