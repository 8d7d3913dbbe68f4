"""Tests for the webcal render command."""
import json
from pathlib import Path

from click.testing import CliRunner
from icalendar import Calendar

from conftest import STUDENT_ID
from orchestrator.run import main


def _write(tmp_path: Path, dataset: dict) -> str:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(dataset), encoding="utf-8")
    return str(path)


def test_render_to_file(tmp_path: Path, dataset: dict) -> None:
    output = tmp_path / "feed.ics"

    result = CliRunner().invoke(
        main,
        [_write(tmp_path, dataset), "--user", str(STUDENT_ID), "--now", "2024-04-01", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    cal = Calendar.from_ical(output.read_bytes())
    assert [str(ev["uid"]) for ev in cal.walk("VEVENT")] == ["E-11", "E-12"]
    assert str(cal["prodid"]) == "Doubtfire"


def test_render_for_user_without_webcal_uses_defaults(tmp_path: Path, dataset: dict) -> None:
    output = tmp_path / "feed.ics"

    result = CliRunner().invoke(
        main,
        [_write(tmp_path, dataset), "--user", "20", "--now", "2024-04-01",
         "--product-name", "Tasks", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    cal = Calendar.from_ical(output.read_bytes())
    assert [str(ev["uid"]) for ev in cal.walk("VEVENT")] == ["E-11", "E-12", "E-13"]
    assert str(cal["prodid"]) == "Tasks"


def test_missing_date_exits_with_error(tmp_path: Path, dataset: dict) -> None:
    del dataset["task_definitions"][0]["target_date"]

    result = CliRunner().invoke(
        main,
        [_write(tmp_path, dataset), "--user", str(STUDENT_ID), "--now", "2024-04-01"],
    )

    assert result.exit_code == 1
