"""Make a device's subscriptions on gpodder.net match a local list of feeds."""

import asyncio
import os
import sys

from mygpo_api import GPodderClient, GPodderDefaultAuthClient, GPodderUserCredentials

USERNAME = os.environ.get("GPODDER_NET_USERNAME")
PASSWORD = os.environ.get("GPODDER_NET_PASSWORD")
DEVICE_ID = os.environ.get("GPODDER_NET_DEVICEID")
if not USERNAME or not PASSWORD or not DEVICE_ID:
    raise ValueError("Please set GPODDER_NET_USERNAME, GPODDER_NET_PASSWORD and GPODDER_NET_DEVICEID.")


async def main(local_feeds: list[str]):
    auth_client = GPodderDefaultAuthClient(user_credentials=GPodderUserCredentials(USERNAME, PASSWORD))
    async with GPodderClient(auth_client=auth_client, device_id=DEVICE_ID) as client:
        remote_feeds = set(await client.get_subscriptions_of_device())
        add = sorted(set(local_feeds) - remote_feeds)
        remove = sorted(remote_feeds - set(local_feeds))
        result = await client.upload_subscription_changes(add=add, remove=remove)
        for old_url, new_url in result.update_urls:
            print(f"Server rewrote {old_url} to {new_url}")
        print(f"Added {len(add)}, removed {len(remove)}; timestamp {result.timestamp}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
