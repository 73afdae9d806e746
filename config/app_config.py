"""应用配置模块

负责创建FastAPI应用实例、装配服务和配置路由
"""
import logging
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from config.exception_handlers import configure_exception_handlers
from config.middleware import configure_middleware
from config.settings import Settings, settings
from models import create_db_engine, create_session_factory, create_tables
from routers import auth, changelogs, projects, tasks, users
from schemas import BaseResponse
from services.container import build_services
from utils.logging_middleware import setup_logging

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None,
               session_factory: Optional[sessionmaker] = None) -> FastAPI:
    """创建FastAPI应用实例

    未传入会话工厂时按配置创建数据库引擎；服务对象在此创建一次，
    保存在 app.state.services 上。
    """
    app_settings = app_settings or settings
    setup_logging(
        app_settings.LOG_LEVEL,
        app_settings.LOG_FILE,
        app_settings.LOG_MAX_SIZE,
        app_settings.LOG_BACKUP_COUNT,
    )

    if session_factory is None:
        engine = create_db_engine(app_settings.DATABASE_URL, echo=app_settings.DATABASE_ECHO)
        if app_settings.CREATE_TABLES_ON_STARTUP:
            create_tables(engine)
        session_factory = create_session_factory(engine)

    app = FastAPI(
        title=app_settings.APP_NAME,
        description=app_settings.APP_DESCRIPTION,
        version=app_settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )
    app.state.settings = app_settings
    app.state.services = build_services(session_factory, app_settings)

    configure_middleware(app, app_settings)
    configure_exception_handlers(app)
    configure_routes(app, app_settings)

    logger.info(f"{app_settings.APP_NAME} {app_settings.VERSION} 已创建 (environment={app_settings.ENVIRONMENT})")
    return app


def configure_routes(app: FastAPI, app_settings: Settings) -> None:
    """配置应用路由"""
    prefix = app_settings.API_V1_STR
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["认证"])
    app.include_router(users.router, prefix=f"{prefix}/users", tags=["用户管理"])
    app.include_router(projects.router, prefix=f"{prefix}/projects", tags=["项目管理"])
    app.include_router(tasks.router, prefix=f"{prefix}/tasks", tags=["任务管理"])
    app.include_router(changelogs.router, prefix=f"{prefix}/changelogs", tags=["变更日志"])

    # 根路径
    @app.get("/", response_model=BaseResponse)
    async def root():
        return BaseResponse(
            message=app_settings.APP_NAME,
            data={"version": app_settings.VERSION}
        )

    # 健康检查
    @app.get("/health", response_model=BaseResponse)
    async def health_check():
        return BaseResponse(message="服务运行正常", data={"status": "healthy"})
