"""mygpo_api helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
import logging
import re
from typing import TYPE_CHECKING

from yarl import URL

from mygpo_api.const import MAX_RESULT_COUNT
from mygpo_api.exceptions import GPodderApiValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

_LOGGER = logging.getLogger(__name__)

DEVICE_ID_PATTERN = re.compile(r"^[\w.-]+$")


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a gpodder.net timestamp. Naive timestamps are in UTC."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    """Format a datetime the way gpodder.net expects it (``2009-12-12T09:00:00``, UTC)."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat(timespec="seconds")


def validate_device_id(device_id: str | None) -> str:
    """Check that a device id matches ``[\\w.-]+``."""
    if device_id is None:
        raise GPodderApiValidationError("No device id given, and the client has no default device id")
    if not DEVICE_ID_PATTERN.match(device_id):
        raise GPodderApiValidationError(f"Invalid device id: {device_id!r}")
    return device_id


def validate_url(url: str) -> str:
    """Check that a podcast or episode URL is an absolute http(s) URL."""
    if not isinstance(url, str):
        raise GPodderApiValidationError(f"URL must be a string, got {type(url).__name__}")
    try:
        parsed = URL(url)
    except ValueError as err:
        raise GPodderApiValidationError(f"Invalid URL: {url!r}") from err
    if not parsed.is_absolute() or parsed.scheme not in ("http", "https") or not parsed.host:
        raise GPodderApiValidationError(f"Invalid URL: {url!r}")
    return url


def validate_urls(urls: Iterable[str]) -> list[str]:
    if isinstance(urls, str):
        raise GPodderApiValidationError("Expected a list of URLs, got a single string")
    return [validate_url(url) for url in urls]


def validate_count(count: int, name: str = "count") -> int:
    """Check that a result count is an integer between 1 and :data:`MAX_RESULT_COUNT`."""
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_RESULT_COUNT:
        raise GPodderApiValidationError(f"{name} must be an integer between 1 and {MAX_RESULT_COUNT}")
    return count


def validate_since(since: int) -> int:
    if isinstance(since, bool) or not isinstance(since, int) or since < 0:
        raise GPodderApiValidationError(f"since must be a non-negative integer, got {since!r}")
    return since
