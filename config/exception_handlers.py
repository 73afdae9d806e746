"""异常处理器配置模块

配置全局异常处理器，所有错误都以统一的响应格式返回
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.exceptions import BusinessException
from utils.response_utils import standard_response
from utils.status_codes import HTTP_STATUS_CODE_MAP, INTERNAL_ERROR, VALIDATION_ERROR

logger = logging.getLogger(__name__)


def configure_exception_handlers(app: FastAPI) -> None:
    """配置全局异常处理器"""

    @app.exception_handler(BusinessException)
    async def business_exception_handler(request: Request, exc: BusinessException):
        """业务异常处理器"""
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 业务异常: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=standard_response(data=jsonable_encoder(exc.data), code=exc.code, message=exc.message),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """HTTP异常处理器"""
        # 根据HTTP状态码映射到自定义状态码
        code = HTTP_STATUS_CODE_MAP.get(exc.status_code, str(exc.status_code))

        detail = exc.detail
        if isinstance(detail, dict):
            message = detail.get("message", str(detail))
            data = detail.get("data")
        else:
            message = str(detail)
            data = None

        return JSONResponse(
            status_code=exc.status_code,
            content=standard_response(data=data, code=code, message=message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """请求参数校验异常处理器"""
        return JSONResponse(
            status_code=400,
            content=standard_response(
                data=jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
                code=VALIDATION_ERROR,
                message="请求参数错误",
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """通用异常处理器"""
        logger.exception(f"{request.method} {request.url.path} 未处理的异常: {exc}")

        return JSONResponse(
            status_code=500,
            content=standard_response(code=INTERNAL_ERROR, message="服务器内部错误"),
        )
