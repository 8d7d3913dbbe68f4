"""
Selection of the task definitions that belong on a webcal.

A task definition is shown when its unit is active, running at `now`, not
excluded by the webcal, and enrolled in by the webcal's user through a project
whose target grade is at or above the definition's target grade.
"""
from __future__ import annotations

import logging
import typing as t
from dataclasses import replace
from datetime import date, datetime

from webcal_server.models import Project, TaskDefinition, Webcal

logger = logging.getLogger(__name__)


def _as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def unit_is_current(task_definition: TaskDefinition, webcal: Webcal, today: date) -> bool:
    """Whether the definition's unit is active, not excluded and running on `today`."""
    unit = task_definition.unit
    return (
        unit.active
        and unit.id not in webcal.unit_exclusions
        and unit.start_date <= today <= unit.end_date
    )


def matching_projects(task_definition: TaskDefinition, webcal: Webcal) -> list[Project]:
    """Projects of the webcal's user in which the definition is within the target grade."""
    return [
        p for p in task_definition.unit.projects
        if p.user_id == webcal.user_id and task_definition.target_grade <= p.target_grade
    ]


def select_task_definitions(
        webcal: Webcal,
        task_definitions: t.Iterable[TaskDefinition],
        now: date | datetime,
) -> list[TaskDefinition]:
    """Select the task definitions to include in `webcal` at `now`.

    Returned definitions are copies ordered by id. Their `tasks` hold only the
    user's own tasks (those attempted under a matching project), most recently
    created first.

    :param webcal: The webcal being generated.
    :param task_definitions: Candidate definitions with their unit, the unit's
        projects and all tasks attempted against them.
    :param now: The moment of generation, captured once by the caller.
    :return: The eligible task definitions.
    """
    today = _as_date(now)
    selected: list[TaskDefinition] = []

    for td in task_definitions:
        if not unit_is_current(td, webcal, today):
            continue

        projects = matching_projects(td, webcal)
        if not projects:
            continue

        project_ids = {p.id for p in projects}
        own_tasks = sorted(
            (task for task in td.tasks if task.project_id in project_ids),
            key=lambda task: task.id,
            reverse=True,
        )
        selected.append(replace(td, tasks=own_tasks))

    selected.sort(key=lambda td: td.id)
    logger.debug("Selected %d task definition(s) for webcal %s", len(selected), webcal.id)
    return selected
