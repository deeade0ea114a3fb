"""mygpo_api models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from mashumaro import field_options
from mashumaro.config import BaseConfig
from mashumaro.mixins.orjson import DataClassORJSONMixin

from mygpo_api.helpers import format_timestamp, parse_timestamp


@dataclass
class BaseDataClassORJSONMixin(DataClassORJSONMixin):
    class Config(BaseConfig):
        omit_none = True
        allow_deserialization_not_by_alias = True


class GPodderDeviceType(StrEnum):
    """Enumeration of gpodder.net device types."""

    DESKTOP = "desktop"
    LAPTOP = "laptop"
    MOBILE = "mobile"
    SERVER = "server"
    OTHER = "other"

    def __str__(self):
        return self.value.capitalize()


class GPodderEpisodeActionType(StrEnum):
    """Enumeration of episode actions."""

    DOWNLOAD = "download"
    DELETE = "delete"
    PLAY = "play"
    NEW = "new"
    FLATTR = "flattr"


@dataclass(eq=False)
class GPodderPodcast(BaseDataClassORJSONMixin):
    """Represents a podcast as listed by gpodder.net.

    Podcasts are identified by their feed URL; two instances with the same
    URL are equal regardless of the other (server-computed) fields.
    """

    url: str
    title: str | None = None
    author: str | None = None
    description: str | None = None
    subscribers: int | None = None
    subscribers_last_week: int | None = None
    logo_url: str | None = None
    scaled_logo_url: str | None = None
    website: str | None = None
    mygpo_link: str | None = None
    position_last_week: int | None = None

    def __eq__(self, other):
        if not isinstance(other, GPodderPodcast):
            return NotImplemented
        return self.url == other.url

    def __lt__(self, other):
        if not isinstance(other, GPodderPodcast):
            return NotImplemented
        return self.url < other.url

    def __hash__(self):
        return hash(self.url)

    def __str__(self):
        return f"{self.title}: {self.description} <{self.url}>"


@dataclass(eq=False)
class GPodderSuggestion(GPodderPodcast):
    """A podcast the user is not subscribed to, suggested from existing subscriptions."""


@dataclass(eq=False)
class GPodderDevice(BaseDataClassORJSONMixin):
    """Represents a device registered under a gpodder.net account."""

    id: str
    caption: str
    type: GPodderDeviceType
    subscriptions: int = 0

    def __eq__(self, other):
        if not isinstance(other, GPodderDevice):
            return NotImplemented
        return self.id == other.id

    def __lt__(self, other):
        if not isinstance(other, GPodderDevice):
            return NotImplemented
        return self.id < other.id

    def __hash__(self):
        return hash(self.id)

    def __str__(self):
        return f"{self.type!s} {self.caption} (id={self.id})"


@dataclass
class GPodderTag(BaseDataClassORJSONMixin):
    """Represents a tag in the podcast directory."""

    title: str
    tag: str
    usage: int = 0


@dataclass
class GPodderUploadResult(BaseDataClassORJSONMixin):
    """Result of uploading subscription changes or episode actions.

    ``update_urls`` holds ``(old_url, new_url)`` pairs for every URL the server
    rewrote. Clients should replace their local copy of the old URL.
    """

    timestamp: int
    update_urls: list[tuple[str, str]] = field(default_factory=list)

    def __str__(self):
        return f"{self.timestamp}: {self.update_urls}"


@dataclass
class GPodderSubscriptionChanges(BaseDataClassORJSONMixin):
    """Subscription changes of a device since a given timestamp."""

    timestamp: int
    add: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)

    def __str__(self):
        return f"{self.timestamp}: add{self.add}, remove{self.remove}"


@dataclass
class GPodderEpisode(BaseDataClassORJSONMixin):
    """Represents an episode."""

    title: str
    url: str
    podcast_title: str | None = None
    podcast_url: str | None = None
    description: str | None = None
    website: str | None = None
    mygpo_link: str | None = None
    released: datetime | None = field(
        default=None,
        metadata=field_options(
            deserialize=parse_timestamp,
            serialize=format_timestamp,
        ),
    )
    status: GPodderEpisodeActionType | None = None


@dataclass
class GPodderDeviceUpdates(BaseDataClassORJSONMixin):
    """Everything that changed for a device since a given timestamp."""

    timestamp: int
    add: list[GPodderPodcast] = field(default_factory=list)
    remove: list[str] = field(default_factory=list, metadata=field_options(alias="rem"))
    updates: list[GPodderEpisode] = field(default_factory=list)


@dataclass(kw_only=True)
class GPodderEpisodeAction(BaseDataClassORJSONMixin):
    """Represents a single episode action (download, play, ...)."""

    podcast: str
    episode: str
    action: GPodderEpisodeActionType
    device: str | None = None
    timestamp: datetime | None = field(
        default=None,
        metadata=field_options(
            deserialize=parse_timestamp,
            serialize=format_timestamp,
        ),
    )
    guid: str | None = None
    started: int | None = None
    position: int | None = None
    total: int | None = None


@dataclass
class GPodderEpisodeActions(BaseDataClassORJSONMixin):
    """A page of episode actions, with the timestamp to continue from."""

    timestamp: int
    actions: list[GPodderEpisodeAction] = field(default_factory=list)


@dataclass
class GPodderSyncStatus(BaseDataClassORJSONMixin):
    """Device synchronization status of an account."""

    synchronized: list[list[str]] = field(default_factory=list)
    not_synchronized: list[str] = field(
        default_factory=list, metadata=field_options(alias="not-synchronized")
    )
