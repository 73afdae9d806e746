"""服务层模块初始化文件

提供服务层的统一导入接口
"""

from .auth_token_service import AuthTokenService, PasswordResetRequest
from .changelog_service import ChangelogService
from .container import Services, build_services, get_services
from .delete_plan import DeletePlan
from .project_management_service import ProjectManagementService
from .project_query_service import ProjectQueryService
from .project_validation_service import ProjectValidationService
from .status_transitions import TASK_STATUS_TRANSITIONS, get_allowed_transitions, validate_transition
from .task_management_service import TaskManagementService
from .task_query_service import TaskQueryService
from .task_validation_service import TaskValidationService
from .user_service import UserService

__all__ = [
    "Services", "build_services", "get_services",
    "AuthTokenService", "PasswordResetRequest", "ChangelogService", "DeletePlan",
    "ProjectManagementService", "ProjectQueryService", "ProjectValidationService",
    "TaskManagementService", "TaskQueryService", "TaskValidationService",
    "TASK_STATUS_TRANSITIONS", "get_allowed_transitions", "validate_transition",
    "UserService",
]
