"""统一异常处理模块

服务层只抛出这里定义的业务异常，由 config.exception_handlers
统一转换为HTTP响应。HTTP状态由业务状态码决定。
"""
from typing import Any, Optional

from utils.status_codes import (
    AUTH_ERROR, CONFLICT, PERMISSION_ERROR, RESOURCE_ERROR, TOKEN_ERROR,
    TOO_MANY_REQUESTS, TRANSACTION_ERROR, VALIDATION_ERROR, http_status_for
)


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(self, code: str, message: str, data: Any = None, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.data = data
        self.status_code = status_code or http_status_for(code)
        super().__init__(message)


class ValidationException(BusinessException):
    """字段校验失败或非法的状态流转"""

    def __init__(self, message: str, data: Any = None):
        super().__init__(VALIDATION_ERROR, message, data)


class AuthenticationException(BusinessException):
    def __init__(self, message: str = "认证失败", data: Any = None):
        super().__init__(AUTH_ERROR, message, data)


class PermissionException(BusinessException):
    """请求者不是项目所有者也不是管理员"""

    def __init__(self, message: str = "权限不足", data: Any = None):
        super().__init__(PERMISSION_ERROR, message, data)


class ResourceNotFoundException(BusinessException):
    def __init__(self, message: str = "资源不存在", data: Any = None):
        super().__init__(RESOURCE_ERROR, message, data)


class ResourceConflictException(BusinessException):
    """资源冲突：唯一键重复或并发修改"""

    def __init__(self, message: str = "资源冲突", data: Any = None):
        super().__init__(CONFLICT, message, data)


class InvalidTokenException(BusinessException):
    """密码重置令牌不存在、不匹配、已过期或已使用"""

    def __init__(self, message: str = "重置令牌无效", data: Any = None):
        super().__init__(TOKEN_ERROR, message, data)


class RateLimitException(BusinessException):
    def __init__(self, message: str = "请求过于频繁，请稍后再试", data: Any = None):
        super().__init__(TOO_MANY_REQUESTS, message, data)


class TransactionException(BusinessException):
    """事务异常

    事务执行过程中出现的非业务异常，抛出前事务已回滚。
    """

    def __init__(self, message: str = "事务执行失败", data: Any = None):
        super().__init__(TRANSACTION_ERROR, message, data)
