"""
模型模块初始化文件
提供统一的导入接口
"""

# 导入数据库基础配置
from .database import Base, create_db_engine, create_session_factory, create_tables, session_scope

# 导入枚举类型
from .enums import TaskStatus, TaskPriority, ProjectStatus, ProjectPriority, UserRole

# 导入模型类
from .user import User
from .project import Project
from .task import Task
from .changelog import ChangeLog
from .auth_token import PasswordResetToken, RefreshToken

__all__ = [
    # 数据库配置
    'Base', 'create_db_engine', 'create_session_factory', 'create_tables', 'session_scope',

    # 枚举类型
    'TaskStatus', 'TaskPriority', 'ProjectStatus', 'ProjectPriority', 'UserRole',

    # 模型类
    'User', 'Project', 'Task', 'ChangeLog', 'PasswordResetToken', 'RefreshToken',
]
