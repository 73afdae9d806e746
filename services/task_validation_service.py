"""任务验证服务模块"""
from typing import Any, Dict, Mapping, Optional, Sequence

from models import TaskPriority, TaskStatus
from utils.exceptions import ValidationException
from utils.permissions import has_admin_permission
from .status_transitions import validate_transition
from .validation_service import BaseValidationService


class TaskValidationService(BaseValidationService):
    """任务验证服务类"""

    entity_label = "任务"
    contents_max_length = 5000
    assignee_max_length = 100

    def validate_contents(self, contents: Any) -> Optional[str]:
        return self.validate_text_length(contents, self.contents_max_length, "任务内容")

    def validate_status(self, status: Any) -> TaskStatus:
        return self.validate_enum(status, TaskStatus, "任务状态")

    def validate_priority(self, priority: Any) -> TaskPriority:
        return self.validate_enum(priority, TaskPriority, "任务优先级")

    def validate_assignee(self, assignee: Any) -> Optional[str]:
        """校验负责人，None 或空字符串表示未分配"""
        if assignee is None or assignee == "":
            return None
        if not isinstance(assignee, str) or not assignee.strip():
            raise ValidationException("负责人不能为空字符串")
        if len(assignee) > self.assignee_max_length:
            raise ValidationException(f"负责人名称不能超过{self.assignee_max_length}个字符")
        return assignee.strip()

    def validate_task_transition(self, current_status: Any, new_status: Any) -> bool:
        return validate_transition(current_status, new_status)

    def validate_task_ownership(self, project_owner_id: int, requesting_user_id: int,
                                roles: Sequence[str] = ()) -> bool:
        """任务归属于项目，项目所有者和管理员可以修改任务"""
        if has_admin_permission(roles):
            return True
        return project_owner_id == requesting_user_id

    def validate_task_data(self, data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
        """校验任务字段，返回规范化后的字段"""
        validated: Dict[str, Any] = {}

        if not partial or "name" in data:
            validated["name"] = self.validate_name(data.get("name"))
        if "contents" in data:
            validated["contents"] = self.validate_contents(data["contents"])
        if "status" in data:
            validated["status"] = self.validate_status(data["status"])
        if "priority" in data:
            validated["priority"] = self.validate_priority(data["priority"])
        if "due_date" in data:
            value = data["due_date"]
            validated["due_date"] = None if value is None else self.validate_due_date(value)
        if "assignee" in data:
            validated["assignee"] = self.validate_assignee(data["assignee"])
        if "progress" in data:
            validated["progress"] = self.validate_progress(data["progress"])

        return validated
