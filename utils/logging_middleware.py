"""
日志配置与请求日志中间件
记录每个API请求的方法、路径、状态码和耗时
"""

import json
import logging
import os
import time
import uuid
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

SENSITIVE_FIELDS = {
    'password', 'passwd', 'secret', 'token', 'key',
    'authorization', 'auth', 'credential', 'private'
}

logger = logging.getLogger("taskhive.api")


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None,
                  max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5) -> None:
    """设置日志配置

    始终输出到控制台；设置 log_file 时额外写入滚动日志文件。
    重复调用不会产生重复的处理器。
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_taskhive", False):
            root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler._taskhive = True
    root.addHandler(console_handler)

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler._taskhive = True
        root.addHandler(file_handler)


def mask_sensitive_data(data):
    """隐藏敏感数据"""
    if isinstance(data, dict):
        masked = {}
        for key, value in data.items():
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_FIELDS):
                masked[key] = "***MASKED***"
            else:
                masked[key] = mask_sensitive_data(value)
        return masked
    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    return data


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """请求响应日志中间件"""

    def __init__(self, app, log_bodies: bool = False):
        super().__init__(app)
        self.log_bodies = log_bodies

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # 生成请求ID用于追踪
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        method = request.method
        path = request.url.path

        if self.log_bodies and method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            if body:
                try:
                    payload = mask_sensitive_data(json.loads(body.decode("utf-8")))
                    logger.debug(f"[{request_id}] 请求体: {json.dumps(payload, ensure_ascii=False)}")
                except (json.JSONDecodeError, UnicodeDecodeError):
                    logger.debug(f"[{request_id}] 请求体: <binary data: {len(body)} bytes>")

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(f"[{request_id}] {method} {path} 请求处理异常: {e}, 耗时: {process_time:.3f}s")
            raise

        process_time = time.time() - start_time
        logger.info(f"[{request_id}] {method} {path} -> {response.status_code} ({process_time:.3f}s)")
        response.headers["X-Request-ID"] = request_id
        return response
