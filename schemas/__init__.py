# 基础模式
from .base import BaseResponse

# 用户相关模式
from .user import (
    RegisterRequest, LoginRequest, LoginResponse, UserResponse,
    ProfileUpdateRequest, ChangePasswordRequest, RolesUpdateRequest,
    RefreshTokenRequest, TokenResponse, VerifyPasswordRequest,
    ForgotPasswordRequest, ResetPasswordRequest, PasswordResetResponse
)

# 项目相关模式
from .project import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProgressUpdate,
    StatusChangeRequest, DeletePlanResponse, ProjectStats
)

# 任务相关模式
from .task import (
    TaskCreate, TaskUpdate, TaskResponse, AssignRequest, MoveRequest,
    TaskProgressUpdate, TaskStatusChangeRequest, TaskStats
)

# 变更日志相关模式
from .changelog import ChangeLogCreate, ChangeLogResponse
