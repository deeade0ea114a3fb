"""mygpo_api cli tool."""

import argparse
import asyncio
from collections.abc import AsyncGenerator
import contextlib
import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from mygpo_api.__version__ import __version__
from mygpo_api.auth import GPodderDefaultAuthClient
from mygpo_api.auth.models import GPodderUserCredentials
from mygpo_api.cli.utils import pretty_dataclass, pretty_dataclass_list, url_list_table
from mygpo_api.client import GPodderClient
from mygpo_api.const import DEFAULT_RESULT_COUNT, ENV_DEVICE_ID, ENV_PASSWORD, ENV_USERNAME
from mygpo_api.exceptions import GPodderApiError
from mygpo_api.models import GPodderDeviceType

console = Console()

PODCAST_FIELDS = ["title", "url", "subscribers"]


def main_parser() -> argparse.ArgumentParser:
    """Create the ArgumentParser with all relevant subparsers."""
    parser = argparse.ArgumentParser(description="A simple executable to use and test the library.")
    _add_default_arguments(parser)

    subparsers = parser.add_subparsers(dest="cmd")
    subparsers.required = True

    #
    # Authentication
    #
    login_parser = subparsers.add_parser("login", description="Verify your credentials.")
    login_parser.set_defaults(func=login)

    #
    # Devices
    #
    devices_parser = subparsers.add_parser("devices", description="List your devices.")
    devices_parser.set_defaults(func=list_devices)

    device_parser = subparsers.add_parser("device", description="Create or update a device.")
    device_parser.add_argument("--caption", help="Human readable label for the device")
    device_parser.add_argument(
        "--type",
        dest="device_type",
        choices=[t.value for t in GPodderDeviceType],
        help="Type of the device",
    )
    device_parser.set_defaults(func=update_device)

    updates_parser = subparsers.add_parser("updates", description="Get updates for a device.")
    _add_since_argument(updates_parser)
    updates_parser.add_argument("--actions", action="store_true", help="Include episode actions.")
    updates_parser.set_defaults(func=get_device_updates)

    #
    # Subscriptions
    #
    subscriptions_parser = subparsers.add_parser(
        "subscriptions", description="List subscriptions of a device, or of all devices with --all."
    )
    subscriptions_parser.add_argument("--all", action="store_true", help="Subscriptions on all devices.")
    subscriptions_parser.set_defaults(func=get_subscriptions)

    subscribe_parser = subparsers.add_parser("subscribe", description="Subscribe a device to podcast(s).")
    subscribe_parser.add_argument("urls", nargs="+", help="Feed URL(s).")
    subscribe_parser.set_defaults(func=subscribe)

    unsubscribe_parser = subparsers.add_parser(
        "unsubscribe", description="Unsubscribe a device from podcast(s)."
    )
    unsubscribe_parser.add_argument("urls", nargs="+", help="Feed URL(s).")
    unsubscribe_parser.set_defaults(func=unsubscribe)

    changes_parser = subparsers.add_parser("changes", description="Get subscription changes of a device.")
    _add_since_argument(changes_parser)
    changes_parser.set_defaults(func=get_subscription_changes)

    #
    # Episode actions
    #
    actions_parser = subparsers.add_parser("actions", description="Get episode actions.")
    actions_parser.add_argument("--podcast", help="(optional) Only actions for this feed URL.")
    actions_parser.add_argument("--since", type=int, default=None, help="(optional) Timestamp.")
    actions_parser.add_argument("--aggregated", action="store_true", help="Only the latest actions.")
    actions_parser.set_defaults(func=get_episode_actions)

    favorites_parser = subparsers.add_parser("favorites", description="Get your favorite episodes.")
    favorites_parser.set_defaults(func=get_favorites)

    #
    # Suggestions and directory
    #
    suggestions_parser = subparsers.add_parser("suggestions", description="Get podcast suggestions.")
    _add_limit_argument(suggestions_parser)
    suggestions_parser.set_defaults(func=get_suggestions)

    toplist_parser = subparsers.add_parser("toplist", description="Get the most popular podcasts.")
    _add_limit_argument(toplist_parser)
    toplist_parser.set_defaults(func=get_toplist)

    search_parser = subparsers.add_parser("search", description="Search the podcast directory.")
    search_parser.add_argument("query", type=str, help="Search query.")
    search_parser.set_defaults(func=search)

    tags_parser = subparsers.add_parser("tags", description="Get the most used tags.")
    _add_limit_argument(tags_parser)
    tags_parser.set_defaults(func=get_tags)

    tag_parser = subparsers.add_parser("tag", description="Get podcasts for a tag.")
    tag_parser.add_argument("tag", type=str, help="Tag.")
    _add_limit_argument(tag_parser)
    tag_parser.set_defaults(func=get_tag)

    podcast_parser = subparsers.add_parser("podcast", description="Get podcast(s) by feed URL.")
    podcast_parser.add_argument("urls", nargs="+", help="Feed URL(s).")
    podcast_parser.set_defaults(func=get_podcasts)

    return parser


def _add_default_arguments(parser: argparse.ArgumentParser):
    """Add default arguments to the parser."""
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s v{__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Logging verbosity level")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument(
        "-u",
        "--username",
        default=os.getenv(ENV_USERNAME),
        help=f"gpodder.net username (default: ${ENV_USERNAME})",
    )
    parser.add_argument(
        "-p",
        "--password",
        default=os.getenv(ENV_PASSWORD),
        help=f"gpodder.net password (default: ${ENV_PASSWORD})",
    )
    parser.add_argument(
        "-d",
        "--device",
        default=os.getenv(ENV_DEVICE_ID),
        help=f"Device id (default: ${ENV_DEVICE_ID})",
    )


def _add_limit_argument(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_RESULT_COUNT,
        help=f"Number of results to return (default={DEFAULT_RESULT_COUNT}).",
    )


def _add_since_argument(parser: argparse.ArgumentParser):
    parser.add_argument("--since", type=int, default=0, help="Timestamp of the last query (default=0).")


async def login(args):
    """Login."""
    async with _get_client(args) as client:
        await client.login()
        console.print(f"Logged in as {client.username}")
        await client.logout()


async def list_devices(args) -> None:
    async with _get_client(args) as client:
        devices = await client.list_devices()
        console.print(
            pretty_dataclass_list(
                sorted(devices),
                visible_fields=["id", "caption", "type", "subscriptions"],
                field_formatters={"type": lambda t, _: str(t)},
            )
        )


async def update_device(args) -> None:
    async with _get_client(args) as client:
        await client.update_device_data(caption=args.caption, device_type=args.device_type)
        console.print(f"Updated device {client.device_id}")


async def get_device_updates(args) -> None:
    async with _get_client(args) as client:
        updates = await client.get_device_updates(since=args.since, include_actions=args.actions)
        console.print(pretty_dataclass_list(updates.add, visible_fields=PODCAST_FIELDS, title="Added"))
        console.print(url_list_table(updates.remove, title="Removed"))
        console.print(
            pretty_dataclass_list(
                updates.updates,
                visible_fields=["podcast_title", "title", "released", "status"],
                title="Episodes",
            )
        )
        console.print(f"Timestamp: {updates.timestamp}")


async def get_subscriptions(args) -> None:
    async with _get_client(args) as client:
        if args.all:
            podcasts = await client.get_all_subscriptions()
            console.print(pretty_dataclass_list(sorted(podcasts), visible_fields=PODCAST_FIELDS))
        else:
            urls = await client.get_subscriptions_of_device()
            console.print(url_list_table(urls, title=f"Subscriptions of {client.device_id}"))


async def subscribe(args) -> None:
    async with _get_client(args) as client:
        result = await client.upload_subscription_changes(add=args.urls)
        console.print(pretty_dataclass(result))


async def unsubscribe(args) -> None:
    async with _get_client(args) as client:
        result = await client.upload_subscription_changes(remove=args.urls)
        console.print(pretty_dataclass(result))


async def get_subscription_changes(args) -> None:
    async with _get_client(args) as client:
        changes = await client.get_subscription_changes(since=args.since)
        console.print(pretty_dataclass(changes))


async def get_episode_actions(args) -> None:
    async with _get_client(args) as client:
        actions = await client.get_episode_actions(
            podcast=args.podcast,
            device_id=args.device,
            since=args.since,
            aggregated=args.aggregated,
        )
        console.print(
            pretty_dataclass_list(
                actions.actions,
                visible_fields=["timestamp", "action", "episode", "device", "position"],
                title=f"Episode actions (timestamp {actions.timestamp})",
            )
        )


async def get_favorites(args) -> None:
    async with _get_client(args) as client:
        episodes = await client.get_favorite_episodes()
        console.print(
            pretty_dataclass_list(episodes, visible_fields=["podcast_title", "title", "released", "url"])
        )


async def get_suggestions(args) -> None:
    async with _get_client(args) as client:
        podcasts = await client.get_suggestions(max_results=args.limit)
        console.print(pretty_dataclass_list(podcasts, visible_fields=PODCAST_FIELDS))


async def get_toplist(args) -> None:
    async with _get_client(args) as client:
        podcasts = await client.get_toplist(count=args.limit)
        console.print(
            pretty_dataclass_list(podcasts, visible_fields=[*PODCAST_FIELDS, "position_last_week"])
        )


async def search(args) -> None:
    async with _get_client(args) as client:
        podcasts = await client.search_podcasts(args.query)
        console.print(pretty_dataclass_list(podcasts, visible_fields=PODCAST_FIELDS))


async def get_tags(args) -> None:
    async with _get_client(args) as client:
        tags = await client.get_top_tags(count=args.limit)
        console.print(pretty_dataclass_list(tags, visible_fields=["tag", "title", "usage"]))


async def get_tag(args) -> None:
    async with _get_client(args) as client:
        podcasts = await client.get_podcasts_for_tag(args.tag, count=args.limit)
        console.print(pretty_dataclass_list(podcasts, visible_fields=PODCAST_FIELDS))


async def get_podcasts(args) -> None:
    async with _get_client(args) as client:
        for url in args.urls:
            podcast = await client.get_podcast_data(url)
            console.print(pretty_dataclass(podcast, title=podcast.title))


@contextlib.asynccontextmanager
async def _get_client(args) -> AsyncGenerator[GPodderClient, None]:
    """Return GPodderClient based on args."""
    if args.username and args.password:
        user_creds = GPodderUserCredentials(args.username, args.password)
    else:
        user_creds = None
    auth_client = GPodderDefaultAuthClient(user_credentials=user_creds)
    client = GPodderClient(auth_client=auth_client, device_id=args.device)
    try:
        await client.__aenter__()
        yield client
    finally:
        await client.__aexit__(None, None, None)


def main():
    """Run."""
    parser = main_parser()
    args = parser.parse_args()

    if args.debug:
        logging_level = logging.DEBUG
    elif args.verbose:
        logging_level = 50 - (args.verbose * 10)
        if logging_level <= 0:
            logging_level = logging.NOTSET
    else:
        logging_level = logging.ERROR

    logging.basicConfig(
        level=logging_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console)],
    )

    try:
        asyncio.run(args.func(args))
    except GPodderApiError as err:
        console.print(f"[red]{type(err).__name__}: {err}[/red]")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
