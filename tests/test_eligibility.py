"""Tests for selecting the task definitions shown on a webcal."""
from datetime import date, datetime

from conftest import NOW, OTHER_STUDENT_ID, STUDENT_ID
from webcal_server.eligibility import select_task_definitions
from webcal_server.models import Project, Task, TaskDefinition, Unit, Webcal


def test_current_unit_definition_is_selected(webcal, task_definition) -> None:
    """A definition within the project's target grade in a running unit is shown."""
    selected = select_task_definitions(webcal, [task_definition], NOW)

    assert [td.id for td in selected] == [task_definition.id]
    assert selected[0].unit is task_definition.unit


def test_unit_outside_window_is_never_selected(webcal, task_definition) -> None:
    """Units that have not started or have ended are excluded."""
    assert select_task_definitions(webcal, [task_definition], date(2024, 2, 25)) == []
    assert select_task_definitions(webcal, [task_definition], date(2024, 7, 1)) == []


def test_window_bounds_are_inclusive(webcal, task_definition) -> None:
    """The first and last day of the unit both count as running."""
    assert len(select_task_definitions(webcal, [task_definition], date(2024, 2, 26))) == 1
    assert len(select_task_definitions(webcal, [task_definition], datetime(2024, 6, 30, 23, 59))) == 1


def test_excluded_unit_is_never_selected(webcal, task_definition) -> None:
    """A unit the user opted out of is excluded even though it is otherwise eligible."""
    webcal.unit_exclusions = {task_definition.unit.id}

    assert select_task_definitions(webcal, [task_definition], NOW) == []


def test_inactive_unit_is_not_selected(webcal, task_definition) -> None:
    task_definition.unit.active = False

    assert select_task_definitions(webcal, [task_definition], NOW) == []


def test_other_users_units_are_not_selected(task_definition) -> None:
    """Only units the webcal's user is enrolled in contribute definitions."""
    stranger = Webcal(id=2, user_id=OTHER_STUDENT_ID, guid="other")

    assert select_task_definitions(stranger, [task_definition], NOW) == []


def test_definitions_above_target_grade_are_not_selected(webcal, unit, project) -> None:
    """Definitions with a higher target grade than the project's are hidden."""
    at_grade = TaskDefinition(id=1, unit=unit, abbreviation="C1", name="Credit", target_grade=1)
    above_grade = TaskDefinition(id=2, unit=unit, abbreviation="D1", name="Distinction", target_grade=2)

    selected = select_task_definitions(webcal, [above_grade, at_grade], NOW)

    assert [td.id for td in selected] == [1]


def test_selection_is_ordered_by_id(webcal, unit, project) -> None:
    """Output order does not depend on input order."""
    definitions = [
        TaskDefinition(id=i, unit=unit, abbreviation=f"T{i}", name=f"Task {i}")
        for i in (5, 2, 9, 1)
    ]

    selected = select_task_definitions(webcal, definitions, NOW)

    assert [td.id for td in selected] == [1, 2, 5, 9]


def test_tasks_of_other_projects_are_dropped(webcal, unit, project, task_definition) -> None:
    """Only tasks attempted under the user's own project are kept."""
    other_project = Project(id=200, user_id=OTHER_STUDENT_ID, unit_id=unit.id, target_grade=3)
    unit.projects.append(other_project)
    task_definition.tasks = [
        Task(id=1, task_definition_id=task_definition.id, project_id=other_project.id, extensions=4),
        Task(id=2, task_definition_id=task_definition.id, project_id=project.id, extensions=1),
    ]

    selected = select_task_definitions(webcal, [task_definition], NOW)

    assert [task.id for task in selected[0].tasks] == [2]


def test_own_tasks_are_most_recent_first(webcal, project, task_definition) -> None:
    task_definition.tasks = [
        Task(id=3, task_definition_id=task_definition.id, project_id=project.id),
        Task(id=8, task_definition_id=task_definition.id, project_id=project.id),
    ]

    selected = select_task_definitions(webcal, [task_definition], NOW)

    assert [task.id for task in selected[0].tasks] == [8, 3]


def test_inputs_are_not_mutated(webcal, unit, project, task_definition) -> None:
    stray = Task(id=1, task_definition_id=task_definition.id, project_id=999)
    task_definition.tasks = [stray]

    select_task_definitions(webcal, [task_definition], NOW)

    assert task_definition.tasks == [stray]


def test_unit_shared_between_users_uses_own_project_grade() -> None:
    """Another user's higher target grade does not reveal definitions to this user."""
    unit = Unit(id=3, code="SWE30003", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    unit.projects = [
        Project(id=1, user_id=STUDENT_ID, unit_id=3, target_grade=0),
        Project(id=2, user_id=OTHER_STUDENT_ID, unit_id=3, target_grade=3),
    ]
    hd = TaskDefinition(id=1, unit=unit, abbreviation="HD", name="HD Task", target_grade=3)
    webcal = Webcal(id=1, user_id=STUDENT_ID, guid="g")

    assert select_task_definitions(webcal, [hd], NOW) == []


def test_empty_input_gives_empty_selection(webcal) -> None:
    assert select_task_definitions(webcal, [], NOW) == []
