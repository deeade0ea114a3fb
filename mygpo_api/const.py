"""mygpo_api constants."""

import logging

from mygpo_api.__version__ import __version__

GPODDER_BASE_URL = "https://gpodder.net"
GPODDER_USER_AGENT = f"mygpo_api/{__version__}"

ENV_USERNAME = "GPODDER_NET_USERNAME"
ENV_PASSWORD = "GPODDER_NET_PASSWORD"
ENV_DEVICE_ID = "GPODDER_NET_DEVICEID"

DEFAULT_REQUEST_TIMEOUT = 15
DEFAULT_RESULT_COUNT = 10
MAX_RESULT_COUNT = 100

LOGGER = logging.getLogger(__package__)
