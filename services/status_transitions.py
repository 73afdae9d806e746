"""任务状态流转表

定义任务状态之间唯一合法的变更。项目状态没有流转限制。
"""
from typing import Any, Dict, FrozenSet, List

from models import TaskStatus

TASK_STATUS_TRANSITIONS: Dict[TaskStatus, FrozenSet[TaskStatus]] = {
    TaskStatus.TODO: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.ON_HOLD}),
    TaskStatus.IN_PROGRESS: frozenset({
        TaskStatus.COMPLETED,
        TaskStatus.ON_HOLD,
        TaskStatus.REQUEST_CHANGES,
        TaskStatus.TODO,
    }),
    # 已完成的任务允许重新打开
    TaskStatus.COMPLETED: frozenset({TaskStatus.REQUEST_CHANGES, TaskStatus.TODO}),
    TaskStatus.ON_HOLD: frozenset({TaskStatus.TODO, TaskStatus.IN_PROGRESS}),
    TaskStatus.REQUEST_CHANGES: frozenset({TaskStatus.TODO, TaskStatus.IN_PROGRESS}),
}


def _as_status(value: Any):
    if isinstance(value, TaskStatus):
        return value
    try:
        return TaskStatus(value)
    except ValueError:
        return None


def validate_transition(current: Any, new: Any) -> bool:
    """判断任务状态变更是否合法，不抛异常"""
    current_status = _as_status(current)
    new_status = _as_status(new)
    if current_status is None or new_status is None:
        return False
    return new_status in TASK_STATUS_TRANSITIONS.get(current_status, frozenset())


def get_allowed_transitions(current: Any) -> List[TaskStatus]:
    """获取当前状态可以流转到的状态列表"""
    current_status = _as_status(current)
    if current_status is None:
        return []
    allowed = TASK_STATUS_TRANSITIONS.get(current_status, frozenset())
    return [status for status in TaskStatus if status in allowed]
