"""
Rendering of task definitions into an iCalendar feed.

Notes:
- Start and end of each event are the same date because every event is an
  all-day event.
- Calendar clients identify events across syncs by UID, which is the task
  definition id prefixed with S- or E- for start and end events. The UID never
  depends on the date, so an extension moves the event instead of duplicating it.
- DTSTAMP is midnight UTC of the event date rather than the generation time,
  so unchanged inputs render to identical bytes.
"""
from __future__ import annotations

import logging
import typing as t
from datetime import date, datetime, time, timedelta, timezone

from icalendar import Alarm, Calendar, Event, vDuration

from webcal_server.errors import MissingRequiredDate
from webcal_server.models import EventVariant, FeedAlarm, FeedEvent, TaskDefinition, Webcal

logger = logging.getLogger(__name__)

# How often clients should pull the feed again
REFRESH_INTERVAL = timedelta(days=1)

_TRIGGER_UNITS = {
    "W": "weeks",
    "D": "days",
    "H": "hours",
    "M": "minutes",
}


def event_name(task_definition: TaskDefinition, webcal: Webcal, variant: EventVariant = "end") -> str:
    """Summary of the `variant` event of a task definition.

    The end event is only prefixed with "End:" when start events are also shown.
    """
    name = f"{task_definition.unit.code}: {task_definition.abbreviation}: {task_definition.name}"
    if variant == "start":
        return f"Start: {name}"
    if variant == "end":
        return f"End: {name}" if webcal.include_start_dates else name
    raise ValueError(f"Unknown event variant: {variant!r}")


def effective_date(task_definition: TaskDefinition) -> date:
    """Target date of a task definition pushed back by the first task's extensions."""
    if task_definition.target_date is None:
        raise MissingRequiredDate(task_definition.id, "target_date")

    extensions = task_definition.tasks[0].extensions if task_definition.tasks else 0
    return task_definition.target_date + timedelta(weeks=extensions)


def reminder_trigger(webcal: Webcal) -> t.Optional[timedelta]:
    """Negative offset of the webcal's reminder, or None without a reminder."""
    if not webcal.reminder:
        return None
    unit = _TRIGGER_UNITS[webcal.reminder_unit]
    return -timedelta(**{unit: webcal.reminder_time})


def _event(uid: str, summary: str, on: date, trigger: t.Optional[timedelta]) -> FeedEvent:
    alarm = FeedAlarm(description=summary, trigger=trigger) if trigger is not None else None
    return FeedEvent(uid=uid, summary=summary, date=on, alarm=alarm)


def build_events(task_definitions: t.Iterable[TaskDefinition], webcal: Webcal) -> list[FeedEvent]:
    """Build the start (optional) and end events of each task definition."""
    trigger = reminder_trigger(webcal)
    events: list[FeedEvent] = []

    for td in task_definitions:
        if webcal.include_start_dates:
            if td.start_date is None:
                raise MissingRequiredDate(td.id, "start_date")
            events.append(_event(f"S-{td.id}", event_name(td, webcal, "start"), td.start_date, trigger))

        events.append(_event(f"E-{td.id}", event_name(td, webcal, "end"), effective_date(td), trigger))

    return events


def _to_vevent(feed_event: FeedEvent) -> Event:
    ev = Event()
    ev.add("uid", feed_event.uid)
    ev.add("dtstamp", datetime.combine(feed_event.date, time(0), tzinfo=timezone.utc))
    ev.add("summary", feed_event.summary)
    ev.add("status", feed_event.status)
    ev.add("dtstart", feed_event.date)
    ev.add("dtend", feed_event.date)

    if feed_event.alarm is not None:
        alarm = Alarm()
        alarm.add("action", feed_event.alarm.action)
        alarm.add("description", feed_event.alarm.description)
        alarm.add("trigger", feed_event.alarm.trigger)
        ev.add_component(alarm)

    return ev


def to_ical(task_definitions: t.Iterable[TaskDefinition], webcal: Webcal, product_name: str) -> Calendar:
    """Build the published calendar for `webcal` from its task definitions.

    :param task_definitions: Eligible task definitions, with unit and tasks loaded.
    :param webcal: The webcal whose preferences shape the events.
    :param product_name: Value of the calendar's PRODID.
    :return: An icalendar Calendar.
    :raises MissingRequiredDate: If any event cannot be dated.
    """
    events = build_events(task_definitions, webcal)

    cal = Calendar()
    cal.add("prodid", product_name)
    cal.add("version", "2.0")
    cal.add("method", "PUBLISH")

    for feed_event in events:
        cal.add_component(_to_vevent(feed_event))

    # Clients honour one or the other, so both are emitted.
    # https://docs.microsoft.com/en-us/openspecs/exchange_server_protocols/ms-oxcical/1fc7b244-ecd1-4d28-ac0c-2bb4df855a1f
    cal.add("x-published-ttl", vDuration(REFRESH_INTERVAL))
    # https://tools.ietf.org/html/rfc7986#section-5.7
    cal.add("refresh-interval", vDuration(REFRESH_INTERVAL), parameters={"VALUE": "DURATION"})

    logger.debug("Rendered %d event(s) for webcal %s", len(events), webcal.id)
    return cal


def render(task_definitions: t.Iterable[TaskDefinition], webcal: Webcal, product_name: str) -> bytes:
    """Serialize the calendar for `webcal` to iCalendar bytes."""
    return to_ical(task_definitions, webcal, product_name).to_ical()
