from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

# 变更日志创建模式
class ChangeLogCreate(BaseModel):
    task_id: Optional[int] = None
    project_id: Optional[int] = None
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    remark: str

# 变更日志响应模式
class ChangeLogResponse(BaseModel):
    id: int
    task_id: Optional[int] = None
    project_id: Optional[int] = None
    user_id: Optional[int] = None
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    remark: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
