"""Init file for mygpo_api."""

from mygpo_api.auth import GPodderDefaultAuthClient
from mygpo_api.auth.models import GPodderUserCredentials
from mygpo_api.client import (
    GPodderClient,
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

__all__ = [
    "GPodderClient",
    "GPodderDefaultAuthClient",
    "GPodderDevice",
    "GPodderDeviceType",
    "GPodderDeviceUpdates",
    "GPodderEpisode",
    "GPodderEpisodeAction",
    "GPodderEpisodeActionType",
    "GPodderEpisodeActions",
    "GPodderPodcast",
    "GPodderSubscriptionChanges",
    "GPodderSuggestion",
    "GPodderSyncStatus",
    "GPodderTag",
    "GPodderUploadResult",
    "GPodderUserCredentials",
]
