"""Shared fixtures: a small unit with one student enrolled."""
from __future__ import annotations

from datetime import date

import pytest

from webcal_server.models import Project, TaskDefinition, Unit, Webcal
from webcal_server.store import WebcalStore

STUDENT_ID = 10
OTHER_STUDENT_ID = 20
NOW = date(2024, 4, 1)


@pytest.fixture
def unit() -> Unit:
    return Unit(id=1, code="COS10001", start_date=date(2024, 2, 26), end_date=date(2024, 6, 30))


@pytest.fixture
def project(unit: Unit) -> Project:
    project = Project(id=100, user_id=STUDENT_ID, unit_id=unit.id, target_grade=1)
    unit.projects.append(project)
    return project


@pytest.fixture
def task_definition(unit: Unit, project: Project) -> TaskDefinition:
    return TaskDefinition(
        id=7,
        unit=unit,
        abbreviation="A1",
        name="Assignment 1",
        start_date=date(2024, 5, 10),
        target_date=date(2024, 5, 10),
        target_grade=0,
    )


@pytest.fixture
def webcal() -> Webcal:
    return Webcal(id=1, user_id=STUDENT_ID, guid="feed-guid")


@pytest.fixture
def dataset() -> dict:
    """JSON-style document with two units, one of them already over."""
    return {
        "units": [
            {"id": 1, "code": "COS10001", "start_date": "2024-02-26", "end_date": "2024-06-30"},
            {"id": 2, "code": "COS20007", "start_date": "2023-07-31", "end_date": "2023-11-30"},
        ],
        "projects": [
            {"id": 100, "user_id": STUDENT_ID, "unit_id": 1, "target_grade": 2},
            {"id": 101, "user_id": STUDENT_ID, "unit_id": 2, "target_grade": 0},
            {"id": 200, "user_id": OTHER_STUDENT_ID, "unit_id": 1, "target_grade": 3},
        ],
        "task_definitions": [
            {"id": 11, "unit_id": 1, "abbreviation": "P1", "name": "Pass Task 1",
             "start_date": "2024-03-04", "target_date": "2024-03-15", "target_grade": 0},
            {"id": 12, "unit_id": 1, "abbreviation": "D1", "name": "Distinction Task 1",
             "start_date": "2024-04-01", "target_date": "2024-04-19", "target_grade": 2},
            {"id": 13, "unit_id": 1, "abbreviation": "HD1", "name": "High Distinction Task 1",
             "start_date": "2024-04-08", "target_date": "2024-05-03", "target_grade": 3},
            {"id": 21, "unit_id": 2, "abbreviation": "P1", "name": "Old Pass Task",
             "start_date": "2023-08-07", "target_date": "2023-08-18", "target_grade": 0},
        ],
        "tasks": [
            {"id": 1000, "task_definition_id": 11, "project_id": 100, "extensions": 2},
            {"id": 1001, "task_definition_id": 11, "project_id": 200, "extensions": 5},
        ],
        "webcals": [
            {"id": 5, "user_id": STUDENT_ID, "guid": "student-guid"},
        ],
    }


@pytest.fixture
def loaded_store(dataset: dict) -> WebcalStore:
    store = WebcalStore()
    store.load_records(dataset)
    return store
