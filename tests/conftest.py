"""Shared test fixtures for the TaskHive backend tests."""

import os
import sys
from datetime import date

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from models import (
    Project, ProjectStatus, Task, TaskStatus, User,
    create_db_engine, create_session_factory, create_tables, session_scope,
)
from services.container import build_services
from utils.permissions import Principal


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def services(session_factory):
    return build_services(session_factory)


def _add_user(session_factory, email: str, roles) -> User:
    with session_scope(session_factory) as db:
        user = User(email=email, password="not-a-real-hash", first_name="Test", last_name="User", is_active=True)
        user.set_roles(roles)
        db.add(user)
        db.flush()
        db.refresh(user)
        return user


@pytest.fixture
def owner(session_factory) -> User:
    return _add_user(session_factory, "owner@example.com", ["member"])


@pytest.fixture
def other_user(session_factory) -> User:
    return _add_user(session_factory, "other@example.com", ["member"])


@pytest.fixture
def admin(session_factory) -> User:
    return _add_user(session_factory, "admin@example.com", ["admin"])


@pytest.fixture
def owner_principal(owner) -> Principal:
    return Principal(user_id=owner.user_id, roles=["member"])


@pytest.fixture
def other_principal(other_user) -> Principal:
    return Principal(user_id=other_user.user_id, roles=["member"])


@pytest.fixture
def admin_principal(admin) -> Principal:
    return Principal(user_id=admin.user_id, roles=["admin"])


@pytest.fixture
def insert_project(session_factory):
    """Insert a project row directly, bypassing validation (e.g. past due dates)."""
    def _insert(owner_id: int, name: str = "Project", due_date: date = None,
                status: ProjectStatus = ProjectStatus.IN_PROGRESS, archived: bool = False) -> Project:
        with session_scope(session_factory) as db:
            project = Project(
                name=name, user_id=owner_id, description="",
                due_date=due_date, status=status, archived=archived,
            )
            db.add(project)
            db.flush()
            db.refresh(project)
            return project
    return _insert


@pytest.fixture
def insert_task(session_factory):
    """Insert a task row directly, bypassing validation."""
    def _insert(project_id: int, name: str = "Task", due_date: date = None,
                status: TaskStatus = TaskStatus.TODO, assignee: str = None) -> Task:
        with session_scope(session_factory) as db:
            task = Task(project_id=project_id, name=name, due_date=due_date, status=status, assignee=assignee)
            db.add(task)
            db.flush()
            db.refresh(task)
            return task
    return _insert
