"""Tests for the ownership predicate and request principal."""

import pytest

from services.task_validation_service import TaskValidationService
from utils.permissions import Principal, has_admin_permission, validate_ownership


@pytest.mark.parametrize("roles", [[], ["member"], ["admin"], ["member", "admin"]])
def test_owner_may_always_modify(roles):
    assert validate_ownership({"user_id": 7}, 7, roles) is True


@pytest.mark.parametrize("owner_id", [1, 2, None])
def test_admin_may_modify_anything(owner_id):
    assert validate_ownership({"user_id": owner_id}, 99, ["admin"]) is True


@pytest.mark.parametrize("roles", [[], ["member"], ["Admin"]])
def test_non_owner_non_admin_denied(roles):
    assert validate_ownership({"user_id": 1}, 2, roles) is False


def test_works_with_objects():
    class Entity:
        user_id = 3

    assert validate_ownership(Entity(), 3) is True
    assert validate_ownership(Entity(), 4) is False
    assert validate_ownership(object(), 4) is False


def test_principal_admin_flag():
    assert Principal(user_id=1, roles=["admin"]).is_admin
    assert not Principal(user_id=1, roles=["member"]).is_admin
    assert not has_admin_permission(None)


def test_principal_owner_scope():
    assert Principal(user_id=7, roles=["member"]).owner_scope == 7
    assert Principal(user_id=7, roles=["admin"]).owner_scope is None


def test_task_ownership_follows_project_owner():
    service = TaskValidationService()
    assert service.validate_task_ownership(1, 1, [])
    assert service.validate_task_ownership(1, 2, ["admin"])
    assert not service.validate_task_ownership(1, 2, ["member"])
