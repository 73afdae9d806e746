"""Tests for password reset tokens, refresh tokens and password verification."""

from datetime import timedelta

import pytest

from models import PasswordResetToken, RefreshToken, session_scope
from models.base import utcnow
from services.auth_token_service import AuthTokenService
from utils.auth import hash_token, verify_token
from utils.exceptions import (
    AuthenticationException, InvalidTokenException, RateLimitException,
    ResourceNotFoundException, ValidationException,
)

PASSWORD = "Secret123"
NEW_PASSWORD = "Changed456"


@pytest.fixture
def user(services):
    return services.users.register("reset@example.com", PASSWORD)


@pytest.fixture
def tokens(session_factory):
    """Token service without the request cooldown."""
    return AuthTokenService(session_factory, reset_cooldown_minutes=0)


def _expire_reset_token(session_factory, token_id):
    with session_scope(session_factory) as db:
        db.query(PasswordResetToken).filter(PasswordResetToken.id == token_id).update(
            {"expires_at": utcnow() - timedelta(minutes=1)}
        )


def test_reset_token_is_stored_as_digest(services, session_factory, user):
    reset = services.auth_tokens.request_password_reset("Reset@Example.com")
    assert reset.user_id == user.user_id
    assert reset.expires_at > utcnow() + timedelta(minutes=59)

    with session_scope(session_factory) as db:
        record = db.query(PasswordResetToken).filter(PasswordResetToken.id == reset.token_id).one()
        assert record.token_hash == hash_token(reset.token)
        assert record.token_hash != reset.token
        assert record.used is False


def test_reset_request_for_unknown_email(services):
    with pytest.raises(ResourceNotFoundException):
        services.auth_tokens.request_password_reset("nobody@example.com")
    with pytest.raises(ValidationException):
        services.auth_tokens.request_password_reset("not-an-email")


def test_reset_request_cooldown(services, user):
    services.auth_tokens.request_password_reset(user.email)
    with pytest.raises(RateLimitException) as exc_info:
        services.auth_tokens.request_password_reset(user.email)
    assert exc_info.value.status_code == 429


def test_validate_reset_token(tokens, user):
    reset = tokens.request_password_reset(user.email)
    assert tokens.validate_reset_token(reset.token_id, reset.token) == user.user_id

    with pytest.raises(InvalidTokenException):
        tokens.validate_reset_token(reset.token_id, "wrong-token")
    with pytest.raises(InvalidTokenException):
        tokens.validate_reset_token(reset.token_id + 100, reset.token)
    with pytest.raises(InvalidTokenException):
        tokens.validate_reset_token(reset.token_id, None)


def test_expired_reset_token_is_rejected(tokens, session_factory, user):
    reset = tokens.request_password_reset(user.email)
    _expire_reset_token(session_factory, reset.token_id)

    with pytest.raises(InvalidTokenException, match="过期"):
        tokens.validate_reset_token(reset.token_id, reset.token)
    with pytest.raises(InvalidTokenException):
        tokens.reset_password(reset.token_id, reset.token, NEW_PASSWORD)


def test_reset_password_is_single_use(tokens, services, user):
    reset = tokens.request_password_reset(user.email)
    tokens.reset_password(reset.token_id, reset.token, NEW_PASSWORD)

    assert services.users.authenticate(user.email, NEW_PASSWORD) is not None
    assert services.users.authenticate(user.email, PASSWORD) is None

    with pytest.raises(InvalidTokenException, match="已使用"):
        tokens.reset_password(reset.token_id, reset.token, "Another789")
    assert services.users.authenticate(user.email, NEW_PASSWORD) is not None


def test_reset_voids_other_reset_tokens(tokens, user):
    first = tokens.request_password_reset(user.email)
    second = tokens.request_password_reset(user.email)
    tokens.reset_password(second.token_id, second.token, NEW_PASSWORD)

    with pytest.raises(InvalidTokenException):
        tokens.validate_reset_token(first.token_id, first.token)


def test_reset_password_enforces_policy(tokens, user):
    reset = tokens.request_password_reset(user.email)
    with pytest.raises(ValidationException):
        tokens.reset_password(reset.token_id, reset.token, "weak")
    # 校验失败不消耗令牌
    assert tokens.validate_reset_token(reset.token_id, reset.token) == user.user_id


def test_refresh_token_issues_access_token(services, session_factory, user):
    refresh_token = services.auth_tokens.issue_refresh_token(user.user_id)
    access_token = services.auth_tokens.refresh_access_token(refresh_token)

    payload = verify_token(access_token)
    assert payload["sub"] == str(user.user_id)
    assert payload["roles"] == ["member"]

    with session_scope(session_factory) as db:
        record = db.query(RefreshToken).filter(RefreshToken.user_id == user.user_id).one()
        assert record.token_hash == hash_token(refresh_token)


def test_refresh_token_for_unknown_user(services):
    with pytest.raises(ResourceNotFoundException):
        services.auth_tokens.issue_refresh_token(999)


def test_invalid_refresh_tokens(services, session_factory, user):
    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token("garbage")
    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token("")

    expired = services.auth_tokens.issue_refresh_token(user.user_id)
    with session_scope(session_factory) as db:
        db.query(RefreshToken).filter(RefreshToken.token_hash == hash_token(expired)).update(
            {"expires_at": utcnow() - timedelta(days=1)}
        )
    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token(expired)


def test_refresh_rejected_for_inactive_user(services, user):
    refresh_token = services.auth_tokens.issue_refresh_token(user.user_id)
    services.users.deactivate_user(user.user_id)
    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token(refresh_token)


def test_revoke_refresh_token(services, user):
    refresh_token = services.auth_tokens.issue_refresh_token(user.user_id)
    assert services.auth_tokens.revoke_refresh_token(refresh_token) is True
    assert services.auth_tokens.revoke_refresh_token(refresh_token) is False
    assert services.auth_tokens.revoke_refresh_token("unknown") is False

    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token(refresh_token)


def test_reset_password_revokes_refresh_tokens(tokens, services, user):
    refresh_token = services.auth_tokens.issue_refresh_token(user.user_id)
    reset = tokens.request_password_reset(user.email)
    tokens.reset_password(reset.token_id, reset.token, NEW_PASSWORD)

    with pytest.raises(AuthenticationException):
        services.auth_tokens.refresh_access_token(refresh_token)


def test_verify_password(services, user):
    assert services.users.verify_password(user.user_id, PASSWORD) is True
    assert services.users.verify_password(user.user_id, "Wrong1234") is False
    assert services.users.verify_password(user.user_id, "") is False
    with pytest.raises(ResourceNotFoundException):
        services.users.verify_password(999, PASSWORD)
