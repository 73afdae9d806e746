from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any
from utils.response_utils import format_timestamp

# 基础响应模式
class BaseResponse(BaseModel):
    """基础响应模式"""
    code: str = "200"
    message: str = "操作成功"
    data: Optional[Any] = None
    # 使用字符串类型的格式化时间戳
    timestamp: str = Field(default_factory=format_timestamp)

    model_config = ConfigDict(from_attributes=True)
