"""服务容器模块

服务对象在应用启动时基于会话工厂创建一次，保存在 app.state 上，
通过依赖注入提供给路由。
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from config.settings import Settings, settings
from .auth_token_service import AuthTokenService
from .changelog_service import ChangelogService
from .project_management_service import ProjectManagementService
from .project_query_service import ProjectQueryService
from .project_validation_service import ProjectValidationService
from .task_management_service import TaskManagementService
from .task_query_service import TaskQueryService
from .task_validation_service import TaskValidationService
from .user_service import UserService


@dataclass
class Services:
    """应用使用的全部服务"""
    projects: ProjectManagementService
    project_queries: ProjectQueryService
    tasks: TaskManagementService
    task_queries: TaskQueryService
    changelogs: ChangelogService
    users: UserService
    auth_tokens: AuthTokenService


def build_services(session_factory: sessionmaker, app_settings: Optional[Settings] = None) -> Services:
    """基于会话工厂创建服务对象，令牌有效期等取自应用设置"""
    app_settings = app_settings or settings
    project_validation = ProjectValidationService()
    task_validation = TaskValidationService()
    return Services(
        projects=ProjectManagementService(session_factory, project_validation),
        project_queries=ProjectQueryService(session_factory, project_validation),
        tasks=TaskManagementService(session_factory, task_validation),
        task_queries=TaskQueryService(session_factory, task_validation),
        changelogs=ChangelogService(session_factory),
        users=UserService(session_factory),
        auth_tokens=AuthTokenService(
            session_factory,
            reset_expire_minutes=app_settings.PASSWORD_RESET_EXPIRE_MINUTES,
            reset_cooldown_minutes=app_settings.PASSWORD_RESET_COOLDOWN_MINUTES,
            refresh_expire_days=app_settings.REFRESH_TOKEN_EXPIRE_DAYS,
        ),
    )


def get_services(request: Request) -> Services:
    """获取服务容器的依赖函数"""
    return request.app.state.services
