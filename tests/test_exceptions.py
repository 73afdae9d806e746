"""Tests for the business exception hierarchy and its status codes."""

import pytest

from utils.exceptions import (
    AuthenticationException, BusinessException, InvalidTokenException, PermissionException,
    RateLimitException, ResourceConflictException, ResourceNotFoundException,
    TransactionException, ValidationException,
)
from utils.status_codes import HTTP_STATUS_CODE_MAP, get_message, http_status_for


@pytest.mark.parametrize("exc_cls, code, http_status", [
    (ValidationException, "10001", 400),
    (AuthenticationException, "10003", 401),
    (PermissionException, "10004", 403),
    (ResourceNotFoundException, "10005", 404),
    (ResourceConflictException, "409", 409),
    (InvalidTokenException, "10006", 400),
    (RateLimitException, "429", 429),
    (TransactionException, "10007", 500),
])
def test_exception_codes_and_statuses(exc_cls, code, http_status):
    exc = exc_cls("boom") if exc_cls is ValidationException else exc_cls()
    assert isinstance(exc, BusinessException)
    assert exc.code == code
    assert exc.status_code == http_status
    assert exc.message


def test_exception_carries_data():
    exc = ValidationException("非法的状态流转", data={"current": "Todo", "requested": "Done"})
    assert exc.data == {"current": "Todo", "requested": "Done"}
    assert str(exc) == "非法的状态流转"


def test_explicit_status_overrides_code_mapping():
    exc = BusinessException("10001", "teapot", status_code=418)
    assert exc.status_code == 418


def test_unknown_code_defaults():
    assert http_status_for("99999") == 400
    assert get_message("99999") == "未知状态"
    assert get_message("10005") == "项目、任务或用户不存在"


def test_framework_statuses_map_to_codes():
    assert HTTP_STATUS_CODE_MAP[400] == "10001"
    assert HTTP_STATUS_CODE_MAP[401] == "401"
    assert HTTP_STATUS_CODE_MAP[429] == "429"
