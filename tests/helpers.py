from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import encode_basic_auth
from aiohttp.web_response import Response, json_response
import orjson
from yarl import URL

from mygpo_api.const import GPODDER_BASE_URL

if TYPE_CHECKING:
    from aiohttp.web_request import Request
    from aresponses import ResponsesMockServer

GPODDER_HOST = URL(GPODDER_BASE_URL).host
FIXTURE_DIR = Path(__file__).parent / "fixtures"


def save_fixture(name: str, data: dict | list):  # pragma: no cover
    """Save API response data to a fixture file."""
    file_path = FIXTURE_DIR / f"{name}.json"
    with open(file_path, "wb") as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))


def load_fixture(name: str) -> str:
    """Load a fixture."""
    path = FIXTURE_DIR / f"{name}.json"
    if not path.exists():  # pragma: no cover
        raise FileNotFoundError(f"Fixture {name} not found")
    return path.read_text(encoding="utf-8")


def load_fixture_json(name: str):
    """Load a fixture as JSON."""
    data = load_fixture(name)
    return orjson.loads(data)


def basic_auth_header(username: str, password: str) -> str:
    return encode_basic_auth(username, password)


class MockGPodderServer:
    """In-memory stand-in for the subscription endpoints of gpodder.net.

    Keeps one subscription list per device and a change log, so that
    uploads can be read back through the same client.
    """

    def __init__(self, username: str, password: str):
        self.username = username
        self.authorization = basic_auth_header(username, password)
        self.subscriptions: dict[str, list[str]] = {}
        self.changes: list[tuple[int, str, str, str]] = []
        self.timestamp = 1000
        self.requests: list[tuple[str, str]] = []

    def register(self, aresponses: ResponsesMockServer, device_id: str):
        simple_path = f"/subscriptions/{self.username}/{device_id}.json"
        api_path = f"/api/2/subscriptions/{self.username}/{device_id}.json"
        routes = [
            (f"/subscriptions/{self.username}.json", "GET", self._all_subscriptions),
            (simple_path, "GET", self._device_subscriptions),
            (simple_path, "PUT", self._replace_subscriptions),
            (api_path, "POST", self._upload_changes),
            (api_path, "GET", self._get_changes),
        ]
        for path, method, handler in routes:
            aresponses.add(GPODDER_HOST, path, method, handler, repeat=float("inf"))

    def _tick(self) -> int:
        self.timestamp += 1
        return self.timestamp

    def _unauthorized(self, request: Request) -> bool:
        self.requests.append((request.method, request.path))
        return request.headers.get("Authorization") != self.authorization

    @staticmethod
    def _device_of(request: Request) -> str:
        return request.path.rsplit("/", 1)[-1].removesuffix(".json")

    async def _all_subscriptions(self, request: Request):
        if self._unauthorized(request):
            return Response(status=401)
        urls = sorted({url for urls in self.subscriptions.values() for url in urls})
        return json_response(data=[{"url": url, "title": url} for url in urls])

    async def _device_subscriptions(self, request: Request):
        if self._unauthorized(request):
            return Response(status=401)
        device = self._device_of(request)
        if device not in self.subscriptions:
            return Response(status=404, text="Device not found")
        return json_response(data=self.subscriptions[device])

    async def _replace_subscriptions(self, request: Request):
        if self._unauthorized(request):
            return Response(status=401)
        device = self._device_of(request)
        urls = await request.json()
        current = self.subscriptions.get(device, [])
        timestamp = self._tick()
        self.changes.extend((timestamp, device, "add", url) for url in urls if url not in current)
        self.changes.extend((timestamp, device, "remove", url) for url in current if url not in urls)
        self.subscriptions[device] = list(urls)
        return Response(status=200)

    async def _upload_changes(self, request: Request):
        if self._unauthorized(request):
            return Response(status=401)
        device = self._device_of(request)
        payload = await request.json()
        current = self.subscriptions.setdefault(device, [])
        timestamp = self._tick()
        for url in payload["add"]:
            if url not in current:
                current.append(url)
            self.changes.append((timestamp, device, "add", url))
        for url in payload["remove"]:
            if url in current:
                current.remove(url)
            self.changes.append((timestamp, device, "remove", url))
        return json_response(data={"timestamp": timestamp, "update_urls": []})

    async def _get_changes(self, request: Request):
        if self._unauthorized(request):
            return Response(status=401)
        device = self._device_of(request)
        since = int(request.query["since"])
        latest: dict[str, str] = {}
        for timestamp, change_device, action, url in self.changes:
            if change_device == device and timestamp >= since:
                latest[url] = action
        return json_response(
            data={
                "add": [url for url, action in latest.items() if action == "add"],
                "remove": [url for url, action in latest.items() if action == "remove"],
                "timestamp": self.timestamp,
            }
        )
