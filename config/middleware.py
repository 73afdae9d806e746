"""中间件配置模块

包含所有中间件的配置
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings
from utils.logging_middleware import RequestResponseLoggingMiddleware


def configure_middleware(app: FastAPI, app_settings: Settings) -> None:
    """配置应用中间件"""
    # CORS中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["X-Request-ID"],
    )

    # 请求响应日志中间件，调试模式下额外记录请求体
    app.add_middleware(RequestResponseLoggingMiddleware, log_bodies=app_settings.DEBUG)
