from datetime import datetime
from typing import Any, Optional

from .status_codes import SUCCESS, get_message


def format_timestamp(dt: Optional[datetime] = None) -> str:
    """
    格式化时间戳为标准格式

    参数:
        dt: datetime对象，如果为None则使用当前时间

    返回:
        格式化后的时间字符串，格式为 "YYYY-MM-DD HH:MM:SS"
    """
    if dt is None:
        dt = datetime.now()
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def standard_response(data: Any = None, code: str = SUCCESS, message: Optional[str] = None) -> dict:
    """
    生成标准响应格式

    参数:
        data: 响应数据（需已可JSON序列化）
        code: 业务状态码
        message: 响应消息，如果为None则使用状态码对应的默认消息

    返回:
        标准格式的响应字典
    """
    if message is None:
        message = get_message(code)

    return {
        "code": code,
        "message": message,
        "data": data,
        "timestamp": format_timestamp()
    }
