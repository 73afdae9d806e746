"""字段验证服务基类

项目与任务共用的字段校验逻辑。所有方法无副作用，
校验失败抛出 ValidationException。
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Type

from pydantic import BaseModel

from utils.exceptions import ValidationException
from utils.permissions import validate_ownership


def to_field_dict(data: Any) -> Dict[str, Any]:
    """把请求数据转换为字段字典

    pydantic 模型只保留显式设置的字段，以区分"未提供"和"显式为空"。
    """
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


class BaseValidationService:
    """字段验证服务基类"""

    entity_label = "实体"
    name_max_length = 200

    def validate_name(self, name: Any) -> str:
        """校验名称，返回去除首尾空白后的名称"""
        if not isinstance(name, str) or not name.strip():
            raise ValidationException(f"{self.entity_label}名称不能为空")
        if len(name) > self.name_max_length:
            raise ValidationException(
                f"{self.entity_label}名称不能超过{self.name_max_length}个字符"
            )
        return name.strip()

    def validate_text_length(self, text: Any, max_length: int, label: str) -> Optional[str]:
        """校验文本长度，None 原样返回"""
        if text is None:
            return None
        if not isinstance(text, str):
            raise ValidationException(f"{label}必须是字符串")
        if len(text) > max_length:
            raise ValidationException(f"{label}不能超过{max_length}个字符")
        return text

    def validate_enum(self, value: Any, allowed: Type[Enum], label: str = "取值") -> Enum:
        """校验枚举取值，失败时列出所有可选值"""
        if isinstance(value, allowed):
            return value
        try:
            return allowed(value)
        except ValueError:
            options = [member.value for member in allowed]
            raise ValidationException(
                f"无效的{label}，可选值: {', '.join(options)}",
                data={"value": value, "allowed": options},
            )

    def parse_due_date(self, value: Any) -> date:
        """解析截止日期，支持 date、datetime 和 ISO 格式字符串"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str) and value.strip():
            text = value.strip()
            try:
                if len(text) <= 10:
                    return date.fromisoformat(text)
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            except ValueError:
                pass
        raise ValidationException("截止日期格式无效", data={"value": str(value)})

    def validate_due_date(self, value: Any) -> date:
        return self.parse_due_date(value)

    def validate_progress(self, progress: Any) -> int:
        """校验进度：0-100之间的整数"""
        if isinstance(progress, bool) or not isinstance(progress, (int, float)):
            raise ValidationException("进度必须是整数")
        if isinstance(progress, float):
            if not progress.is_integer():
                raise ValidationException("进度必须是整数")
            progress = int(progress)
        if progress < 0 or progress > 100:
            raise ValidationException("进度必须在0到100之间")
        return progress

    def validate_bool(self, value: Any, label: str) -> bool:
        if not isinstance(value, bool):
            raise ValidationException(f"{label}必须是布尔值")
        return value

    def validate_ownership(self, entity: Any, requesting_user_id: int, roles: Sequence[str] = ()) -> bool:
        return validate_ownership(entity, requesting_user_id, roles)
