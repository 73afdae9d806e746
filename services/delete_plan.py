"""级联删除计划模块

删除前先枚举受影响的子记录，生成删除计划。
计划既可以作为预演结果返回，也可以在同一事务中执行。
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from models import ChangeLog, Project, Task

logger = logging.getLogger(__name__)


@dataclass
class DeletePlan:
    """删除计划：将被删除的项目、任务和变更日志"""
    project_id: Optional[int] = None
    task_ids: List[int] = field(default_factory=list)
    changelog_ids: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "project_id": self.project_id,
            "task_ids": list(self.task_ids),
            "changelog_ids": list(self.changelog_ids),
            "task_count": len(self.task_ids),
            "changelog_count": len(self.changelog_ids),
        }


def _project_task_ids(project_id: int):
    return select(Task.id).where(Task.project_id == project_id)


def build_project_delete_plan(db: Session, project_id: int) -> DeletePlan:
    """枚举删除项目时会一并删除的任务和变更日志"""
    task_ids = [row[0] for row in db.execute(_project_task_ids(project_id).order_by(Task.id))]
    changelog_ids = [
        row[0] for row in db.execute(
            select(ChangeLog.id)
            .where(or_(
                ChangeLog.project_id == project_id,
                ChangeLog.task_id.in_(_project_task_ids(project_id)),
            ))
            .order_by(ChangeLog.id)
        )
    ]
    return DeletePlan(project_id=project_id, task_ids=task_ids, changelog_ids=changelog_ids)


def build_task_delete_plan(db: Session, task_id: int) -> DeletePlan:
    """枚举删除任务时会一并删除的变更日志"""
    changelog_ids = [
        row[0] for row in db.execute(
            select(ChangeLog.id).where(ChangeLog.task_id == task_id).order_by(ChangeLog.id)
        )
    ]
    return DeletePlan(project_id=None, task_ids=[task_id], changelog_ids=changelog_ids)


def execute_delete_plan(db: Session, plan: DeletePlan) -> None:
    """按 变更日志 -> 任务 -> 项目 的顺序执行删除

    必须在调用方的事务中执行，任何一步失败由调用方整体回滚。
    """
    if plan.project_id is not None:
        db.execute(
            delete(ChangeLog)
            .where(or_(
                ChangeLog.project_id == plan.project_id,
                ChangeLog.task_id.in_(_project_task_ids(plan.project_id)),
            ))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            delete(Task)
            .where(Task.project_id == plan.project_id)
            .execution_options(synchronize_session=False)
        )
        db.execute(
            delete(Project)
            .where(Project.id == plan.project_id)
            .execution_options(synchronize_session=False)
        )
    else:
        db.execute(
            delete(ChangeLog)
            .where(ChangeLog.task_id.in_(plan.task_ids))
            .execution_options(synchronize_session=False)
        )
        db.execute(
            delete(Task)
            .where(Task.id.in_(plan.task_ids))
            .execution_options(synchronize_session=False)
        )

    logger.info(
        f"删除计划已执行: project={plan.project_id} tasks={len(plan.task_ids)} "
        f"changelogs={len(plan.changelog_ids)}"
    )
