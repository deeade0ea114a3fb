"""mygpo_api cli helpers."""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Callable, TypeVar

from rich.table import Table
from rich.text import Text

from mygpo_api.models import BaseDataClassORJSONMixin

T = TypeVar("T", bound=BaseDataClassORJSONMixin)


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_format_value(v) for v in value)
    if isinstance(value, tuple):
        return " -> ".join(_format_value(v) for v in value)
    return str(value)


def pretty_dataclass(
    dataclass_obj: T,
    visible_fields: list[str] | None = None,
    title: str | None = None,
    hide_none: bool = True,
) -> Table:
    """Render a single dataclass object as a two column field/value table."""
    names = visible_fields or [f.name for f in fields(dataclass_obj)]

    table = Table(title=title, show_header=False, title_justify="left")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for name in names:
        value = getattr(dataclass_obj, name, None)
        if hide_none and value is None:
            continue
        table.add_row(name, _format_value(value))
    return table


def pretty_dataclass_list(
    dataclass_objs: list[T],
    visible_fields: list[str],
    field_formatters: dict[str, Callable[[Any, T], Any]] | None = None,
    title: str | None = None,
) -> Table | Text:
    """Render a list of dataclass objects as a table, one row per object."""
    field_formatters = field_formatters or {}

    if not dataclass_objs:
        if title is not None:
            return Text(f"{title}: No results")
        return Text("No results")

    table = Table(title=title, expand=True)
    for name in visible_fields:
        table.add_column(name, style="cyan", no_wrap=name in ("url", "id"))

    for obj in dataclass_objs:
        row = []
        for name in visible_fields:
            value = getattr(obj, name, None)
            if name in field_formatters:
                value = field_formatters[name](value, obj)
            row.append(_format_value(value))
        table.add_row(*row)

    return table


def url_list_table(urls: list[str], title: str | None = None) -> Table | Text:
    """Render a plain list of feed URLs."""
    if not urls:
        return Text(f"{title}: No results" if title else "No results")
    table = Table(title=title, expand=True)
    table.add_column("url", style="cyan", no_wrap=True)
    for url in urls:
        table.add_row(url)
    return table
