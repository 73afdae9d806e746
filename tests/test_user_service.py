"""Tests for UserService and the password/token helpers."""

import pytest

from services.user_service import validate_password
from utils.auth import create_access_token, get_password_hash, verify_password, verify_token
from utils.exceptions import ResourceConflictException, ResourceNotFoundException, ValidationException

PASSWORD = "Secret123"


@pytest.mark.parametrize("password", ["short1A", "alllower123", "ALLUPPER123", "NoDigitsHere", None])
def test_password_policy_rejects(password):
    with pytest.raises(ValidationException):
        validate_password(password)


def test_password_hashing_round_trip():
    hashed = get_password_hash(PASSWORD)
    assert hashed != PASSWORD
    assert verify_password(PASSWORD, hashed)
    assert not verify_password("Wrong1234", hashed)


def test_register_and_authenticate(services):
    user = services.users.register("New.User@Example.com", PASSWORD, "New", "User")
    assert user.email == "new.user@example.com"
    assert user.get_roles() == ["member"]
    assert user.password != PASSWORD

    assert services.users.authenticate("new.user@example.com", PASSWORD).user_id == user.user_id
    assert services.users.authenticate("new.user@example.com", "Wrong1234") is None
    assert services.users.authenticate("nobody@example.com", PASSWORD) is None


def test_register_duplicate_email(services):
    services.users.register("dup@example.com", PASSWORD)
    with pytest.raises(ResourceConflictException):
        services.users.register("DUP@example.com", PASSWORD)


def test_register_rejects_bad_input(services):
    with pytest.raises(ValidationException):
        services.users.register("not-an-email", PASSWORD)
    with pytest.raises(ValidationException):
        services.users.register("weak@example.com", "weak")
    with pytest.raises(ValidationException):
        services.users.register("roles@example.com", PASSWORD, roles=["superuser"])


def test_find_and_profile(services, owner):
    assert services.users.find_by_id(owner.user_id).email == owner.email
    assert services.users.find_by_email("OWNER@example.com").user_id == owner.user_id
    assert services.users.find_by_email("missing@example.com") is None
    with pytest.raises(ResourceNotFoundException):
        services.users.find_by_id(5555)

    updated = services.users.update_profile(owner.user_id, first_name="Ada")
    assert updated.first_name == "Ada"
    assert updated.last_name == "User"


def test_roles_and_activation(services, owner):
    services.users.set_user_roles(owner.user_id, ["member", "admin"])
    assert services.users.get_user_roles(owner.user_id) == ["admin", "member"]
    assert services.users.deactivate_user(owner.user_id).is_active is False
    assert services.users.activate_user(owner.user_id).is_active is True


def test_change_password(services):
    user = services.users.register("pw@example.com", PASSWORD)
    with pytest.raises(ValidationException):
        services.users.change_password(user.user_id, "Wrong1234", "Another123")
    services.users.change_password(user.user_id, PASSWORD, "Another123")
    assert services.users.authenticate("pw@example.com", "Another123") is not None


def test_access_token_claims():
    payload = verify_token(create_access_token(42, ["admin"]))
    assert payload["sub"] == "42"
    assert payload["roles"] == ["admin"]
