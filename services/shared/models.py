"""
Shared Pydantic models for REST API serialization.

This module contains the request/response models of the webcal service and the
record models used to load units, projects, task definitions and tasks from
JSON into the in-memory store.
"""
from __future__ import annotations

import typing as t
from datetime import date

from pydantic import BaseModel, Field, model_validator

from webcal_server.models import validate_reminder


ReminderUnit = t.Literal["W", "D", "H", "M"]


# Source records
class ProjectRecord(BaseModel):
    """A user's enrolment in a unit."""
    id: int
    user_id: int
    unit_id: int
    target_grade: int = 0


class UnitRecord(BaseModel):
    """A unit offering and its enrolment window."""
    id: int
    code: str
    start_date: date
    end_date: date
    active: bool = True


class TaskDefinitionRecord(BaseModel):
    """A scheduled task within a unit."""
    id: int
    unit_id: int
    abbreviation: str
    name: str
    start_date: t.Optional[date] = None
    target_date: t.Optional[date] = None
    target_grade: int = 0


class TaskRecord(BaseModel):
    """A student's attempt at a task definition."""
    id: int
    task_definition_id: int
    project_id: int
    extensions: int = Field(default=0, ge=0)


class WebcalRecord(BaseModel):
    """A previously enabled webcal."""
    id: int
    user_id: int
    guid: str
    include_start_dates: bool = False
    reminder_time: t.Optional[int] = None
    reminder_unit: t.Optional[ReminderUnit] = None
    unit_exclusions: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def _reminder_is_complete(self) -> WebcalRecord:
        validate_reminder(self.reminder_time, self.reminder_unit)
        return self


class WebcalDataset(BaseModel):
    """Everything the store needs to generate webcals."""
    units: list[UnitRecord] = Field(default_factory=list)
    projects: list[ProjectRecord] = Field(default_factory=list)
    task_definitions: list[TaskDefinitionRecord] = Field(default_factory=list)
    tasks: list[TaskRecord] = Field(default_factory=list)
    webcals: list[WebcalRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _references_exist(self) -> WebcalDataset:
        """Every unit, project and task definition referred to is in the dataset."""
        unit_ids = {u.id for u in self.units}
        project_ids = {p.id for p in self.projects}
        task_definition_ids = {td.id for td in self.task_definitions}

        for p in self.projects:
            if p.unit_id not in unit_ids:
                raise ValueError(f"Project {p.id} refers to unknown unit {p.unit_id}")
        for td in self.task_definitions:
            if td.unit_id not in unit_ids:
                raise ValueError(f"Task definition {td.id} refers to unknown unit {td.unit_id}")
        for task in self.tasks:
            if task.task_definition_id not in task_definition_ids:
                raise ValueError(f"Task {task.id} refers to unknown task definition {task.task_definition_id}")
            if task.project_id not in project_ids:
                raise ValueError(f"Task {task.id} refers to unknown project {task.project_id}")
        return self


# Request/Response Models for API endpoints
class Reminder(BaseModel):
    """Reminder preference; time and unit must be given together, or not at all."""
    time: t.Optional[int] = None
    unit: t.Optional[ReminderUnit] = None

    @model_validator(mode="after")
    def _time_and_unit_together(self) -> Reminder:
        validate_reminder(self.time, self.unit)
        return self


class WebcalUpdate(BaseModel):
    """Fields of a webcal that may be changed. Omitted fields are left alone."""
    enabled: t.Optional[bool] = None
    should_change_guid: t.Optional[bool] = None
    include_start_dates: t.Optional[bool] = None
    reminder: t.Optional[Reminder] = None
    unit_exclusions: t.Optional[list[int]] = None


class UpdateWebcalRequest(BaseModel):
    """Request model for updating a user's webcal."""
    webcal: WebcalUpdate


class WebcalResponse(BaseModel):
    """Current state of a user's webcal."""
    enabled: bool
    guid: t.Optional[str] = None
    include_start_dates: bool = False
    reminder: t.Optional[Reminder] = None
    unit_exclusions: list[int] = Field(default_factory=list)
