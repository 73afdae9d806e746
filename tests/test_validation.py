"""Tests for the project and task field validation services."""

from datetime import date, datetime, timedelta

import pytest

from models import ProjectPriority, ProjectStatus, TaskPriority, TaskStatus
from services.project_validation_service import ProjectValidationService
from services.task_validation_service import TaskValidationService
from services.validation_service import to_field_dict
from schemas import ProjectUpdate
from utils.exceptions import ValidationException

projects = ProjectValidationService()
tasks = TaskValidationService()


@pytest.mark.parametrize("name", ["", "   ", None, 42, "x" * 201])
def test_invalid_names_rejected(name):
    with pytest.raises(ValidationException):
        projects.validate_name(name)


def test_name_is_trimmed_and_200_chars_allowed():
    assert projects.validate_name("  Roadmap  ") == "Roadmap"
    assert tasks.validate_name("x" * 200) == "x" * 200


def test_description_and_contents_limits():
    assert projects.validate_description(None) == ""
    assert projects.validate_description("d" * 2000) == "d" * 2000
    with pytest.raises(ValidationException):
        projects.validate_description("d" * 2001)
    assert tasks.validate_contents("c" * 5000) == "c" * 5000
    with pytest.raises(ValidationException):
        tasks.validate_contents("c" * 5001)


@pytest.mark.parametrize("value", [-1, 101, 50.5, True, "50", None])
def test_progress_rejected(value):
    with pytest.raises(ValidationException):
        projects.validate_progress(value)


@pytest.mark.parametrize("value", [0, 50, 100, 50.0])
def test_progress_accepted(value):
    assert projects.validate_progress(value) == int(value)


def test_enum_validation_lists_allowed_values():
    assert projects.validate_priority("High") is ProjectPriority.HIGH
    assert tasks.validate_priority("Critical") is TaskPriority.CRITICAL
    with pytest.raises(ValidationException) as exc_info:
        projects.validate_priority("Critical")
    assert exc_info.value.data["allowed"] == ["Low", "Medium", "High"]


def test_status_enums_are_separate():
    assert projects.validate_status("Completed") is ProjectStatus.COMPLETED
    assert tasks.validate_status("Done") is TaskStatus.COMPLETED
    with pytest.raises(ValidationException):
        tasks.validate_status("Completed")
    with pytest.raises(ValidationException):
        projects.validate_status("Todo")


def test_due_date_parsing():
    tomorrow = date.today() + timedelta(days=1)
    assert tasks.validate_due_date(tomorrow.isoformat()) == tomorrow
    assert tasks.validate_due_date(datetime(2030, 1, 2, 10, 30)) == date(2030, 1, 2)
    assert tasks.validate_due_date("2030-01-02T10:30:00Z") == date(2030, 1, 2)
    with pytest.raises(ValidationException):
        tasks.validate_due_date("next tuesday")


def test_project_due_date_cannot_be_in_the_past_but_task_due_date_can():
    yesterday = date.today() - timedelta(days=1)
    with pytest.raises(ValidationException):
        projects.validate_due_date(yesterday)
    assert projects.validate_due_date(date.today()) == date.today()
    assert tasks.validate_due_date(yesterday) == yesterday


def test_assignee_validation():
    assert tasks.validate_assignee(None) is None
    assert tasks.validate_assignee("") is None
    assert tasks.validate_assignee("  alice ") == "alice"
    with pytest.raises(ValidationException):
        tasks.validate_assignee("   ")
    with pytest.raises(ValidationException):
        tasks.validate_assignee("a" * 101)


def test_validate_project_data_full_and_partial():
    validated = projects.validate_project_data({"name": " Roadmap ", "priority": "High"})
    assert validated == {"name": "Roadmap", "priority": ProjectPriority.HIGH}

    with pytest.raises(ValidationException):
        projects.validate_project_data({"priority": "High"})

    partial = projects.validate_project_data({"due_date": None, "archived": True}, partial=True)
    assert partial == {"due_date": None, "archived": True}


def test_validate_task_data_is_strict():
    with pytest.raises(ValidationException):
        tasks.validate_task_data({"name": "X", "priority": "Urgent"})
    with pytest.raises(ValidationException):
        tasks.validate_task_data({"name": "X", "status": "Completed"})


def test_to_field_dict_keeps_only_explicit_fields():
    assert to_field_dict(ProjectUpdate(due_date=None)) == {"due_date": None}
    assert to_field_dict(ProjectUpdate()) == {}
    assert to_field_dict({"name": "x"}) == {"name": "x"}
    assert to_field_dict(None) == {}


def test_validate_enum_coerces_values_and_lists_options():
    assert tasks.validate_enum("Done", TaskStatus) is TaskStatus.COMPLETED
    assert projects.validate_enum(ProjectPriority.HIGH, ProjectPriority) is ProjectPriority.HIGH

    with pytest.raises(ValidationException) as exc_info:
        tasks.validate_enum("Finished", TaskStatus)
    assert "Done" in exc_info.value.data["allowed"]
    assert exc_info.value.data["value"] == "Finished"
