"""应用设置模块

所有配置项从环境变量和 .env 文件读取
"""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # 应用配置
    APP_NAME: str = "TaskHive"
    APP_DESCRIPTION: str = "TaskHive 项目与任务管理系统API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    API_V1_STR: str = "/api/v1"

    # 服务器配置
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./taskhive.db"
    DATABASE_ECHO: bool = False  # 是否显示SQLAlchemy的SQL日志
    CREATE_TABLES_ON_STARTUP: bool = True

    # JWT配置
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # 密码重置配置
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    PASSWORD_RESET_COOLDOWN_MINUTES: int = 10  # 同一用户两次申请的最短间隔
    FRONTEND_URL: str = "http://localhost:3000"
    EXPOSE_RESET_LINK: bool = False  # 未接入邮件服务时在响应中返回重置链接，仅限开发环境

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None
    LOG_MAX_SIZE: int = 10 * 1024 * 1024  # 10 MB
    LOG_BACKUP_COUNT: int = 5

    # CORS配置
    cors_origins: list[str] = ["*"]  # 生产环境请修改

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


# 全局设置实例
settings = Settings()
