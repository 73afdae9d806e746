from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Union
from datetime import date, datetime
from models import ProjectStatus, ProjectPriority

# 进度既可以是整数也可以是浮点数，是否为整数由服务层校验
Progress = Union[int, float]

# 项目创建模式
class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None
    priority: Optional[str] = Field(None, description="Low / Medium / High")
    status: Optional[str] = Field(None, description="项目状态")
    due_date: Optional[date] = None
    progress: Optional[Progress] = None

# 项目更新模式：只有显式提供的字段会被更新
class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[date] = None  # 显式传 null 清除截止日期
    progress: Optional[Progress] = None
    archived: Optional[bool] = None

class ProgressUpdate(BaseModel):
    progress: Progress

class StatusChangeRequest(BaseModel):
    status: str
    remark: str

# 项目响应模式
class ProjectResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    user_id: int
    priority: ProjectPriority
    status: ProjectStatus
    due_date: Optional[date] = None
    progress: int
    archived: bool
    archived_at: Optional[datetime] = None
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class DeletePlanResponse(BaseModel):
    project_id: Optional[int] = None
    task_ids: List[int] = Field(default_factory=list)
    changelog_ids: List[int] = Field(default_factory=list)
    task_count: int = 0
    changelog_count: int = 0

class ProjectStats(BaseModel):
    total: int
    in_progress: int
    completed: int
    archived: int
    overdue: int
