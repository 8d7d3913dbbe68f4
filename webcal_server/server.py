# -*- coding: utf-8 -*-
from __future__ import annotations

import json
from datetime import datetime

from fastmcp import FastMCP

from webcal_server import config
from webcal_server.logging_setup import setup_logging
from webcal_server.models import FeedEvent
from webcal_server.renderer import build_events, render
from webcal_server.store import store

mcp = FastMCP("WebcalServer")


def get_webcal_events(guid: str, now: datetime | None = None) -> list[FeedEvent]:
    """Internal function to build the events of a webcal as dataclass objects.

    :param guid: The webcal's guid.
    :param now: Moment of generation; defaults to the current time.
    :return: A list of FeedEvent objects.
    """
    webcal = store.get_webcal_by_guid(guid)
    now = now or datetime.now()
    return build_events(store.task_definitions_for(webcal, now), webcal)


def get_webcal_feed(guid: str, now: datetime | None = None) -> str:
    """Internal function to render a webcal as iCalendar text.

    :param guid: The webcal's guid.
    :param now: Moment of generation; defaults to the current time.
    :return: The iCalendar document.
    """
    webcal = store.get_webcal_by_guid(guid)
    now = now or datetime.now()
    return render(store.task_definitions_for(webcal, now), webcal, config.PRODUCT_NAME).decode("utf-8")


def format_webcal_events(events: list[FeedEvent]) -> str:
    """Internal function to format webcal events as a clean table.

    :param events: The events to format.
    :return: Formatted table string of the events.
    """
    if not events:
        return "📅 No webcal events found."

    lines = []
    lines.append("📅 WEBCAL EVENTS")
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'UID':<10} {'Summary':<55} {'Date':<14} {'Reminder':<15}")
    lines.append("-" * 100)

    for idx, event in enumerate(events, 1):
        summary = event.summary[:54] if len(event.summary) > 54 else event.summary
        reminder = str(-event.alarm.trigger) + " before" if event.alarm else "—"
        lines.append(
            f"{idx:<4} {event.uid:<10} {summary:<55} {event.date.strftime('%a %-m/%-d/%Y'):<14} {reminder:<15}"
        )

    lines.append("=" * 100)
    lines.append(f"Total: {len(events)} event(s)")
    return "\n".join(lines)


@mcp.tool()
def generate_webcal_feed(guid: str) -> str:
    """Generates the iCalendar feed of a webcal.

    :param guid: The webcal's guid.
    :return: The iCalendar document as text.
    """
    return get_webcal_feed(guid)


@mcp.tool()
def list_webcal_events(guid: str) -> list[FeedEvent]:
    """Lists the events currently on a webcal.

    :param guid: The webcal's guid.
    :return: A list of webcal events.
    """
    return get_webcal_events(guid)


@mcp.tool()
def show_webcal_events(guid: str) -> str:
    """Displays the events currently on a webcal in a formatted table.

    :param guid: The webcal's guid.
    :return: Formatted table of events, or a message if there are none.
    """
    return format_webcal_events(get_webcal_events(guid))


def main() -> None:
    """Seed the store from `WEBCAL_DATA_FILE`, if set, and serve the tools over stdio."""
    setup_logging(config.LOG_LEVEL)
    if config.DATA_FILE:
        with open(config.DATA_FILE, "r", encoding="utf-8") as f:
            store.load_records(json.load(f))
    mcp.run()


if __name__ == "__main__":
    main()
