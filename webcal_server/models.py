"""
Data models for webcal feed generation.

This module contains the dataclasses used to represent the units, projects and
task definitions a webcal is generated from, the webcal (subscriber) itself, and
the declarative event/alarm records the renderer serializes.
"""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from datetime import date, timedelta

from webcal_server.errors import InvalidReminderConfiguration


# Units by which task reminders (alarms) can be set.
# Documented at https://tools.ietf.org/html/rfc5545#section-3.3.6
VALID_TIME_UNITS: tuple[str, ...] = ("W", "D", "H", "M")

EventVariant = t.Literal["start", "end"]


@dataclass
class Project:
    """A user's enrolment in a unit, with the grade they are aiming for."""
    id: int
    user_id: int
    unit_id: int
    target_grade: int = 0


@dataclass
class Unit:
    """A unit offering with an active enrolment window."""
    id: int
    code: str
    start_date: date
    end_date: date
    active: bool = True
    projects: list[Project] = field(default_factory=list)


@dataclass
class Task:
    """A student's attempt at a task definition within one project."""
    id: int
    task_definition_id: int
    project_id: int
    extensions: int = 0  # number of one-week extensions granted


@dataclass
class TaskDefinition:
    """A scheduled, gradable task within a unit."""
    id: int
    unit: Unit
    abbreviation: str
    name: str
    start_date: t.Optional[date] = None
    target_date: t.Optional[date] = None
    target_grade: int = 0
    tasks: list[Task] = field(default_factory=list)


@dataclass
class Webcal:
    """A user's calendar subscription and its preferences."""
    id: int
    user_id: int
    guid: str
    include_start_dates: bool = False
    reminder_time: t.Optional[int] = None
    reminder_unit: t.Optional[str] = None
    unit_exclusions: set[int] = field(default_factory=set)

    @property
    def reminder(self) -> bool:
        """Whether both `reminder_time` and `reminder_unit` are present."""
        return self.reminder_time is not None and bool(self.reminder_unit)


@dataclass
class FeedAlarm:
    """A display reminder nested inside a feed event."""
    description: str
    trigger: timedelta
    action: str = "DISPLAY"


@dataclass
class FeedEvent:
    """An all-day calendar event ready to be serialized."""
    uid: str
    summary: str
    date: date
    status: str = "CONFIRMED"
    alarm: t.Optional[FeedAlarm] = None


def validate_reminder(reminder_time: t.Optional[int], reminder_unit: t.Optional[str]) -> None:
    """Check that a reminder is either complete and valid, or absent.

    :raises InvalidReminderConfiguration: If only one of time and unit is given,
        the time is not positive, or the unit is not one of `VALID_TIME_UNITS`.
    """
    if reminder_time is None and reminder_unit is None:
        return
    if reminder_time is None or reminder_unit is None:
        raise InvalidReminderConfiguration("Reminder time and unit must be specified together")
    if reminder_time <= 0:
        raise InvalidReminderConfiguration(f"Reminder time must be positive, got {reminder_time}")
    if reminder_unit not in VALID_TIME_UNITS:
        raise InvalidReminderConfiguration(
            f"Reminder unit must be one of {', '.join(VALID_TIME_UNITS)}, got {reminder_unit!r}"
        )
