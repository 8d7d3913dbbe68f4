"""Exceptions raised while managing and generating webcals."""
from __future__ import annotations


class WebcalError(Exception):
    """Base class for webcal errors."""


class InvalidReminderConfiguration(WebcalError, ValueError):
    """Reminder time and unit were not supplied together, or are out of range."""


class WebcalNotFound(WebcalError, LookupError):
    """No webcal exists for the requested user or guid."""


class MissingRequiredDate(WebcalError):
    """A task definition lacks a date needed to place one of its events."""

    def __init__(self, task_definition_id: int, field_name: str) -> None:
        self.task_definition_id = task_definition_id
        self.field_name = field_name
        super().__init__(f"Task definition {task_definition_id} has no {field_name}")
