"""Tests for TaskManagementService."""

from datetime import date, timedelta

import pytest
from sqlalchemy import event

from models import ChangeLog, Task, TaskPriority, TaskStatus, session_scope
from utils.exceptions import (
    PermissionException, ResourceNotFoundException, TransactionException, ValidationException,
)


@pytest.fixture
def project(services, owner):
    return services.projects.create_project(owner.user_id, {"name": "Tasks home"})


def _task_count(session_factory):
    with session_scope(session_factory) as db:
        return db.query(Task).count()


def test_create_task_defaults(services, project):
    task = services.tasks.create_task(project.id, {"name": "  Write docs  "})
    assert task.name == "Write docs"
    assert task.status is TaskStatus.TODO
    assert task.priority is TaskPriority.MEDIUM
    assert task.assignee is None
    assert task.progress == 0


def test_create_task_in_missing_project(services, session_factory):
    """createTask(999) fails and leaves no task row behind."""
    with pytest.raises(ResourceNotFoundException):
        services.tasks.create_task(999, {"name": "X"})
    assert _task_count(session_factory) == 0


def test_create_task_allows_past_due_date(services, project):
    yesterday = date.today() - timedelta(days=1)
    assert services.tasks.create_task(project.id, {"name": "Late", "due_date": yesterday}).due_date == yesterday


@pytest.mark.parametrize("bad", [
    {"name": ""},
    {"name": "X", "priority": "Urgent"},
    {"name": "X", "status": "Archived"},
    {"name": "X", "assignee": "   "},
    {"name": "X", "progress": 101},
    {"name": "X", "contents": "c" * 5001},
])
def test_create_task_is_strict(services, project, session_factory, bad):
    with pytest.raises(ValidationException):
        services.tasks.create_task(project.id, bad)
    assert _task_count(session_factory) == 0


def test_create_task_checks_principal(services, project, other_principal):
    with pytest.raises(PermissionException):
        services.tasks.create_task(project.id, {"name": "Intruder"}, other_principal)


def test_update_task_follows_transition_table(services, project):
    task = services.tasks.create_task(project.id, {"name": "Flow"})

    with pytest.raises(ValidationException) as exc_info:
        services.tasks.update_task(task.id, {"status": "Done"})
    assert exc_info.value.data["allowed"] == ["In Progress", "On Hold"]

    task = services.tasks.update_task(task.id, {"status": "In Progress"})
    task = services.tasks.update_task(task.id, {"status": "Done"})
    assert task.status is TaskStatus.COMPLETED

    # re-setting the current status is not a transition
    task = services.tasks.update_task(task.id, {"status": "Done"})
    assert task.status is TaskStatus.COMPLETED


def test_update_task_rejects_null_status(services, project):
    task = services.tasks.create_task(project.id, {"name": "Nulls"})
    with pytest.raises(ValidationException):
        services.tasks.update_task(task.id, {"status": None})


def test_update_task_partial_fields(services, project):
    task = services.tasks.create_task(project.id, {"name": "Partial", "assignee": "alice", "priority": "High"})
    task = services.tasks.update_task(task.id, {"contents": "details"})
    assert task.assignee == "alice"
    assert task.priority is TaskPriority.HIGH
    task = services.tasks.update_task(task.id, {"assignee": ""})
    assert task.assignee is None


def test_update_missing_task(services):
    with pytest.raises(ResourceNotFoundException):
        services.tasks.update_task(321, {"name": "x"})


def test_update_task_ownership(services, project, other_principal, admin_principal):
    task = services.tasks.create_task(project.id, {"name": "Owned"})
    with pytest.raises(PermissionException):
        services.tasks.update_task(task.id, {"name": "Stolen"}, other_principal)
    assert services.tasks.update_task(task.id, {"name": "Admin edit"}, admin_principal).name == "Admin edit"


def test_assign_and_unassign(services, project):
    task = services.tasks.create_task(project.id, {"name": "Assign me"})
    assert services.tasks.assign_task(task.id, " bob ").assignee == "bob"
    assert services.tasks.unassign_task(task.id).assignee is None
    with pytest.raises(ValidationException):
        services.tasks.assign_task(task.id, "")


@pytest.mark.parametrize("value", [-1, 101, 50.5])
def test_task_progress_rejected(services, project, value):
    task = services.tasks.create_task(project.id, {"name": "Progress"})
    with pytest.raises(ValidationException):
        services.tasks.update_task_progress(task.id, value)


def test_task_progress_accepted(services, project):
    task = services.tasks.create_task(project.id, {"name": "Progress"})
    for value in (0, 50, 100):
        assert services.tasks.update_task_progress(task.id, value).progress == value


def test_move_task_between_owned_projects(services, owner, project):
    target = services.projects.create_project(owner.user_id, {"name": "Target"})
    task = services.tasks.create_task(project.id, {"name": "Mover"})
    moved = services.tasks.move_task_to_project(task.id, target.id, owner.user_id)
    assert moved.project_id == target.id


def test_move_task_forbidden_when_target_not_owned(services, owner, other_user, project):
    """Requester owns the source project but not the target."""
    foreign = services.projects.create_project(other_user.user_id, {"name": "Foreign"})
    task = services.tasks.create_task(project.id, {"name": "Stay"})

    with pytest.raises(PermissionException):
        services.tasks.move_task_to_project(task.id, foreign.id, owner.user_id)
    assert services.task_queries.get_task_by_id(task.id).project_id == project.id


def test_move_task_not_found(services, owner, project):
    task = services.tasks.create_task(project.id, {"name": "Lost"})
    with pytest.raises(ResourceNotFoundException):
        services.tasks.move_task_to_project(task.id, 777, owner.user_id)
    with pytest.raises(ResourceNotFoundException):
        services.tasks.move_task_to_project(778, project.id, owner.user_id)


def test_move_task_has_no_admin_bypass(services, owner, admin, project):
    target = services.projects.create_project(owner.user_id, {"name": "Also owner's"})
    task = services.tasks.create_task(project.id, {"name": "Admin cannot move"})
    with pytest.raises(PermissionException):
        services.tasks.move_task_to_project(task.id, target.id, admin.user_id)


def test_delete_task_removes_changelogs(services, owner, owner_principal, project, session_factory):
    task = services.tasks.create_task(project.id, {"name": "Short lived"})
    keep = services.tasks.create_task(project.id, {"name": "Keep"})
    services.tasks.change_task_status(task.id, "In Progress", "go", owner_principal)
    services.tasks.change_task_status(keep.id, "On Hold", "wait", owner_principal)

    plan = services.tasks.delete_task(task.id, owner.user_id, ["member"])
    assert plan.task_ids == [task.id]
    assert len(plan.changelog_ids) == 1

    with session_scope(session_factory) as db:
        assert db.query(Task).filter(Task.id == task.id).count() == 0
        assert db.query(ChangeLog).filter(ChangeLog.task_id == task.id).count() == 0
        assert db.query(ChangeLog).filter(ChangeLog.task_id == keep.id).count() == 1


def test_delete_task_rolls_back_on_failure(services, owner, owner_principal, project, session_factory, engine):
    """A failure while deleting the task row keeps the task and its changelogs."""
    task = services.tasks.create_task(project.id, {"name": "Survives"})
    services.tasks.change_task_status(task.id, "In Progress", "started", owner_principal)
    services.tasks.change_task_status(task.id, "On Hold", "paused", owner_principal)

    def fail_on_task_delete(conn, cursor, statement, parameters, context, executemany):
        if statement.startswith("DELETE FROM tasks"):
            raise RuntimeError("injected failure")

    event.listen(engine, "before_cursor_execute", fail_on_task_delete)
    try:
        with pytest.raises(TransactionException):
            services.tasks.delete_task(task.id, owner.user_id, ["member"])
    finally:
        event.remove(engine, "before_cursor_execute", fail_on_task_delete)

    with session_scope(session_factory) as db:
        assert db.query(Task).filter(Task.id == task.id).count() == 1
        assert db.query(ChangeLog).filter(ChangeLog.task_id == task.id).count() == 2
    assert services.task_queries.get_task_by_id(task.id).status is TaskStatus.ON_HOLD


def test_delete_task_permissions(services, project, other_user, admin):
    task = services.tasks.create_task(project.id, {"name": "Guarded"})
    with pytest.raises(ResourceNotFoundException):
        services.tasks.delete_task(4040, admin.user_id, ["admin"])
    with pytest.raises(PermissionException):
        services.tasks.delete_task(task.id, other_user.user_id, ["member"])
    services.tasks.delete_task(task.id, admin.user_id, ["admin"])


def test_change_task_status_writes_changelog(services, owner_principal, project):
    task = services.tasks.create_task(project.id, {"name": "Logged"})

    task = services.tasks.change_task_status(task.id, "In Progress", "picked up", owner_principal)
    assert task.status is TaskStatus.IN_PROGRESS

    with pytest.raises(ValidationException):
        services.tasks.change_task_status(task.id, "Todo", "", owner_principal)

    logs = services.changelogs.get_changelogs_by_task(task.id)
    assert len(logs) == 1
    assert (logs[0].old_status, logs[0].new_status, logs[0].remark) == ("Todo", "In Progress", "picked up")


def test_illegal_status_change_writes_nothing(services, owner_principal, project):
    task = services.tasks.create_task(project.id, {"name": "Guarded flow"})
    with pytest.raises(ValidationException):
        services.tasks.change_task_status(task.id, "Done", "skip ahead", owner_principal)
    assert services.changelogs.get_changelogs_by_task(task.id) == []
    assert services.task_queries.get_task_by_id(task.id).status is TaskStatus.TODO


def test_update_task_status_is_logged(services, owner, owner_principal, project):
    task = services.tasks.create_task(project.id, {"name": "Edited"})

    services.tasks.update_task(task.id, {"status": "In Progress", "name": "Edited twice"}, owner_principal)
    services.tasks.update_task(task.id, {"status": "In Progress"}, owner_principal)
    services.tasks.update_task(task.id, {"name": "No status"}, owner_principal)

    logs = services.changelogs.get_changelogs_by_task(task.id)
    assert len(logs) == 1
    assert (logs[0].old_status, logs[0].new_status) == ("Todo", "In Progress")
    assert logs[0].user_id == owner.user_id
    assert logs[0].remark
