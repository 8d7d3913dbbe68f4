# -*- coding: utf-8 -*-
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from webcal_server import config
from webcal_server.errors import WebcalError
from webcal_server.logging_setup import setup_logging
from webcal_server.models import FeedEvent
from webcal_server.renderer import build_events, render
from webcal_server.store import WebcalStore


console = Console(stderr=True)
logger = logging.getLogger(__name__)


def create_events_table(events: list[FeedEvent]) -> Table:
    """Create a summary table of the events on a webcal."""
    table = Table(title="📅 Webcal Events", show_header=True, header_style="bold magenta")
    table.add_column("UID", style="cyan")
    table.add_column("Summary", style="white")
    table.add_column("Date", style="yellow")
    table.add_column("Reminder", style="green")

    for event in events:
        reminder = f"{-event.alarm.trigger} before" if event.alarm else "—"
        table.add_row(event.uid, event.summary, event.date.isoformat(), reminder)

    return table


def load_store(data_file: str) -> WebcalStore:
    """Load a JSON data file into a fresh store."""
    store = WebcalStore()
    with open(data_file, "r", encoding="utf-8") as f:
        store.load_records(json.load(f))
    return store


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("data_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--user", "user_id", type=int, required=True, help="User whose webcal is rendered.")
@click.option(
    "--now",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="Moment of generation (defaults to the current time).",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the .ics file here.")
@click.option("--product-name", default=config.PRODUCT_NAME, show_default=True, help="PRODID of the calendar.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def main(
        data_file: str,
        user_id: int,
        now: datetime | None,
        output: str | None,
        product_name: str,
        verbose: bool,
) -> None:
    """Render a user's webcal from a JSON data file.

    DATA_FILE: JSON document with units, projects, task_definitions, tasks and webcals.
    The user's webcal is enabled with default preferences if the file has none.
    """
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    store = load_store(data_file)
    webcal = store.enable_webcal(user_id)
    now = now or datetime.now()

    task_definitions = store.task_definitions_for(webcal, now)
    try:
        events = build_events(task_definitions, webcal)
        body = render(task_definitions, webcal, product_name)
        logger.debug("Rendered %d byte(s) for user %s", len(body), user_id)
    except WebcalError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    if output:
        Path(output).write_bytes(body)
    else:
        sys.stdout.write(body.decode("utf-8"))

    stats_text = Text()
    stats_text.append("Task definitions: ", style="white")
    stats_text.append(f"{len(task_definitions)}", style="bold green")
    stats_text.append("\n")
    stats_text.append("Events: ", style="white")
    stats_text.append(f"{len(events)}", style="bold green")
    stats_text.append("\n")
    stats_text.append("Generated for: ", style="white")
    stats_text.append(now.isoformat(sep=" ", timespec="minutes"))
    console.print(Panel(stats_text, title=f"📊 Webcal for user {user_id}", border_style="green"))

    if events:
        console.print(create_events_table(events))

    if output:
        console.print(f"[bold green]✅ Wrote {output}[/bold green]")


if __name__ == "__main__":
    main()
