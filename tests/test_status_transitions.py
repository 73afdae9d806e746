"""Tests for the task status transition table."""

import pytest

from models import TaskStatus
from services.status_transitions import (
    TASK_STATUS_TRANSITIONS, get_allowed_transitions, validate_transition,
)

ALLOWED = {
    ("Todo", "In Progress"), ("Todo", "On Hold"),
    ("In Progress", "Done"), ("In Progress", "On Hold"),
    ("In Progress", "Request Changes"), ("In Progress", "Todo"),
    ("Done", "Request Changes"), ("Done", "Todo"),
    ("On Hold", "Todo"), ("On Hold", "In Progress"),
    ("Request Changes", "Todo"), ("Request Changes", "In Progress"),
}


@pytest.mark.parametrize("current", [status.value for status in TaskStatus])
@pytest.mark.parametrize("new", [status.value for status in TaskStatus])
def test_transition_table(current, new):
    assert validate_transition(current, new) == ((current, new) in ALLOWED)


def test_every_status_has_an_entry():
    assert set(TASK_STATUS_TRANSITIONS) == set(TaskStatus)


def test_unknown_values_never_raise():
    assert validate_transition("Todo", "Archived") is False
    assert validate_transition(None, "Todo") is False
    assert get_allowed_transitions("Nope") == []


def test_allowed_transitions_follow_enum_order():
    assert get_allowed_transitions(TaskStatus.TODO) == [TaskStatus.IN_PROGRESS, TaskStatus.ON_HOLD]
    assert get_allowed_transitions("Done") == [TaskStatus.TODO, TaskStatus.REQUEST_CHANGES]
