"""项目验证服务模块"""
from datetime import date
from typing import Any, Dict, Mapping

from models import ProjectPriority, ProjectStatus
from utils.exceptions import ValidationException
from .validation_service import BaseValidationService


class ProjectValidationService(BaseValidationService):
    """项目验证服务类"""

    entity_label = "项目"
    description_max_length = 2000

    def validate_description(self, description: Any) -> str:
        return self.validate_text_length(description, self.description_max_length, "项目描述") or ""

    def validate_priority(self, priority: Any) -> ProjectPriority:
        return self.validate_enum(priority, ProjectPriority, "项目优先级")

    def validate_status(self, status: Any) -> ProjectStatus:
        return self.validate_enum(status, ProjectStatus, "项目状态")

    def validate_due_date(self, value: Any) -> date:
        """项目截止日期不能早于今天"""
        due_date = self.parse_due_date(value)
        if due_date < date.today():
            raise ValidationException("截止日期不能早于今天", data={"value": due_date.isoformat()})
        return due_date

    def validate_project_data(self, data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
        """校验项目字段，返回规范化后的字段

        partial=True 时只校验 data 中出现的字段（更新场景），
        due_date 显式为 None 表示清除截止日期。
        """
        validated: Dict[str, Any] = {}

        if not partial or "name" in data:
            validated["name"] = self.validate_name(data.get("name"))
        if "description" in data:
            validated["description"] = self.validate_description(data["description"])
        if "priority" in data:
            validated["priority"] = self.validate_priority(data["priority"])
        if "status" in data:
            validated["status"] = self.validate_status(data["status"])
        if "due_date" in data:
            value = data["due_date"]
            validated["due_date"] = None if value is None else self.validate_due_date(value)
        if "progress" in data:
            validated["progress"] = self.validate_progress(data["progress"])
        if "archived" in data:
            validated["archived"] = self.validate_bool(data["archived"], "归档标记")

        return validated
