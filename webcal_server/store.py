# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import typing as t
import uuid
from datetime import date, datetime

from services.shared.models import WebcalDataset
from webcal_server.eligibility import select_task_definitions
from webcal_server.errors import WebcalNotFound
from webcal_server.models import Project, Task, TaskDefinition, Unit, Webcal, validate_reminder

logger = logging.getLogger(__name__)


# In-memory storage for units, task definitions and webcals
# In a real application, this would be replaced with a persistent database
class WebcalStore:
    """Holds the records webcals are generated from, keyed by id."""

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Drops every record."""
        self.units: dict[int, Unit] = {}
        self.projects: dict[int, Project] = {}
        self.task_definitions: dict[int, TaskDefinition] = {}
        self.tasks: dict[int, Task] = {}
        self.webcals: dict[int, Webcal] = {}  # by user id
        self._next_webcal_id = 1

    def add_unit(self, unit: Unit) -> None:
        self.units[unit.id] = unit

    def add_project(self, project: Project) -> None:
        """Adds a project and links it to its unit."""
        self.projects[project.id] = project
        self.units[project.unit_id].projects.append(project)

    def add_task_definition(self, task_definition: TaskDefinition) -> None:
        self.task_definitions[task_definition.id] = task_definition

    def add_task(self, task: Task) -> None:
        """Adds a task and links it to its task definition."""
        self.tasks[task.id] = task
        self.task_definitions[task.task_definition_id].tasks.append(task)

    def add_webcal(self, webcal: Webcal) -> None:
        self.webcals[webcal.user_id] = webcal
        self._next_webcal_id = max(self._next_webcal_id, webcal.id + 1)

    def load_records(self, data: dict[str, t.Any]) -> None:
        """Adds the records of a JSON-style document shaped like `WebcalDataset`.

        Nothing is added unless the whole document is valid.

        :param data: The document to load.
        :raises pydantic.ValidationError: If the document is malformed, refers to
            records it does not contain, or gives a webcal half a reminder.
        """
        dataset = WebcalDataset.model_validate(data)

        for u in dataset.units:
            self.add_unit(Unit(**u.model_dump()))
        for p in dataset.projects:
            self.add_project(Project(**p.model_dump()))
        for td in dataset.task_definitions:
            fields = td.model_dump(exclude={"unit_id"})
            self.add_task_definition(TaskDefinition(unit=self.units[td.unit_id], **fields))
        for task in dataset.tasks:
            self.add_task(Task(**task.model_dump()))
        for w in dataset.webcals:
            fields = w.model_dump(exclude={"unit_exclusions"})
            self.add_webcal(Webcal(unit_exclusions=set(w.unit_exclusions), **fields))

        logger.info(
            "Loaded %d unit(s), %d task definition(s), %d webcal(s)",
            len(dataset.units), len(dataset.task_definitions), len(dataset.webcals),
        )

    def get_webcal_for_user(self, user_id: int) -> t.Optional[Webcal]:
        return self.webcals.get(user_id)

    def require_webcal_for_user(self, user_id: int) -> Webcal:
        webcal = self.webcals.get(user_id)
        if webcal is None:
            raise WebcalNotFound(f"User {user_id} has no webcal")
        return webcal

    def get_webcal_by_guid(self, guid: str) -> Webcal:
        """Finds the webcal addressed by `guid`.

        :raises WebcalNotFound: If no webcal has that guid.
        """
        for webcal in self.webcals.values():
            if webcal.guid == guid:
                return webcal
        raise WebcalNotFound(f"No webcal with guid {guid}")

    def enable_webcal(self, user_id: int) -> Webcal:
        """Creates a webcal with default preferences, unless the user already has one."""
        webcal = self.webcals.get(user_id)
        if webcal is None:
            webcal = Webcal(id=self._next_webcal_id, user_id=user_id, guid=str(uuid.uuid4()))
            self.add_webcal(webcal)
            logger.info("Enabled webcal %s for user %s", webcal.id, user_id)
        return webcal

    def disable_webcal(self, user_id: int) -> None:
        """Deletes the user's webcal, along with its exclusions."""
        if self.webcals.pop(user_id, None) is not None:
            logger.info("Disabled webcal for user %s", user_id)

    def rotate_guid(self, user_id: int) -> Webcal:
        """Gives the user's webcal a new guid, invalidating the old feed URL."""
        webcal = self.require_webcal_for_user(user_id)
        webcal.guid = str(uuid.uuid4())
        return webcal

    def set_reminder(self, user_id: int, reminder_time: t.Optional[int], reminder_unit: t.Optional[str]) -> Webcal:
        """Sets or, when both are None, clears the reminder of the user's webcal.

        :raises InvalidReminderConfiguration: If the reminder is incomplete or invalid.
        """
        validate_reminder(reminder_time, reminder_unit)
        webcal = self.require_webcal_for_user(user_id)
        webcal.reminder_time = reminder_time
        webcal.reminder_unit = reminder_unit
        return webcal

    def update_webcal(
            self,
            user_id: int,
            include_start_dates: t.Optional[bool] = None,
            unit_exclusions: t.Optional[t.Iterable[int]] = None,
    ) -> Webcal:
        webcal = self.require_webcal_for_user(user_id)
        if include_start_dates is not None:
            webcal.include_start_dates = include_start_dates
        if unit_exclusions is not None:
            webcal.unit_exclusions = set(unit_exclusions)
        return webcal

    def task_definitions_for(self, webcal: Webcal, now: date | datetime) -> list[TaskDefinition]:
        """Task definitions to include in `webcal` at `now`, with their tasks loaded."""
        return select_task_definitions(webcal, self.task_definitions.values(), now)


store = WebcalStore()
