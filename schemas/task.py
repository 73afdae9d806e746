from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union
from datetime import date, datetime
from models import TaskStatus, TaskPriority

Progress = Union[int, float]

# 任务创建模式
class TaskCreate(BaseModel):
    project_id: int
    name: str
    contents: Optional[str] = None
    status: Optional[str] = Field(None, description="任务状态，默认 Todo")
    priority: Optional[str] = Field(None, description="Low / Medium / High / Critical")
    due_date: Optional[date] = None
    assignee: Optional[str] = None
    progress: Optional[Progress] = None

# 任务更新模式：只有显式提供的字段会被更新
class TaskUpdate(BaseModel):
    name: Optional[str] = None
    contents: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[date] = None
    assignee: Optional[str] = None  # 显式传 null 或空字符串取消分配
    progress: Optional[Progress] = None

class AssignRequest(BaseModel):
    assignee: str

class MoveRequest(BaseModel):
    target_project_id: int

class TaskProgressUpdate(BaseModel):
    progress: Progress

class TaskStatusChangeRequest(BaseModel):
    status: str
    remark: str

# 任务响应模式
class TaskResponse(BaseModel):
    id: int
    project_id: int
    name: str
    contents: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = None
    assignee: Optional[str] = None
    progress: int
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class TaskStats(BaseModel):
    total: int
    todo: int
    in_progress: int
    completed: int
    on_hold: int
    overdue: int
