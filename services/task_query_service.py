"""任务查询服务模块"""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, sessionmaker

from models import Project, Task, TaskStatus, session_scope
from utils.exceptions import ResourceNotFoundException
from .task_validation_service import TaskValidationService


def _search_filter(term: str):
    return or_(
        func.lower(Task.name).contains(term, autoescape=True),
        func.lower(Task.contents).contains(term, autoescape=True),
        func.lower(Task.assignee).contains(term, autoescape=True),
    )


def _overdue(query: Query, as_of: date) -> Query:
    return query.filter(
        Task.due_date.isnot(None),
        Task.due_date < as_of,
        Task.status != TaskStatus.COMPLETED,
    )


class TaskQueryService:
    """任务查询服务类"""

    def __init__(self, session_factory: sessionmaker,
                 validation_service: Optional[TaskValidationService] = None):
        self.session_factory = session_factory
        self.validation = validation_service or TaskValidationService()

    def get_tasks_by_project_id(self, project_id: int) -> List[Task]:
        """获取项目下的任务，最新创建的在前"""
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .filter(Task.project_id == project_id)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .all()
            )

    def get_task_by_id(self, task_id: int) -> Task:
        with session_scope(self.session_factory) as db:
            task = db.query(Task).filter(Task.id == task_id).first()
            if not task:
                raise ResourceNotFoundException(message=f"任务 {task_id} 不存在")
            return task

    def get_tasks_by_status(self, project_id: int, status: Any) -> List[Task]:
        status = self.validation.validate_status(status)
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .filter(Task.project_id == project_id, Task.status == status)
                .order_by(Task.updated_at.desc(), Task.id.desc())
                .all()
            )

    def get_tasks_by_priority(self, project_id: int, priority: Any) -> List[Task]:
        """按优先级获取任务，截止日期近的在前"""
        priority = self.validation.validate_priority(priority)
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .filter(Task.project_id == project_id, Task.priority == priority)
                .order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())
                .all()
            )

    def get_tasks_by_assignee(self, assignee: str) -> List[Task]:
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .filter(Task.assignee == assignee)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .all()
            )

    def get_unassigned_tasks(self, project_id: int) -> List[Task]:
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .filter(Task.project_id == project_id, Task.assignee.is_(None))
                .order_by(Task.created_at.desc(), Task.id.desc())
                .all()
            )

    def get_overdue_tasks(self, project_id: Optional[int] = None,
                          as_of: Optional[date] = None) -> List[Task]:
        """获取逾期任务：截止日期早于今天且未完成"""
        with session_scope(self.session_factory) as db:
            query = _overdue(db.query(Task), as_of or date.today())
            if project_id is not None:
                query = query.filter(Task.project_id == project_id)
            return query.order_by(Task.due_date.asc(), Task.id.asc()).all()

    def get_tasks_for_user(self, user_id: int) -> List[Task]:
        """获取用户拥有的所有项目中的任务"""
        with session_scope(self.session_factory) as db:
            return (
                db.query(Task)
                .join(Project, Task.project_id == Project.id)
                .filter(Project.user_id == user_id)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .all()
            )

    def search_tasks(self, term: str, project_id: Optional[int] = None) -> List[Task]:
        """按名称、内容或负责人搜索任务（不区分大小写）"""
        term = (term or "").strip().lower()
        with session_scope(self.session_factory) as db:
            query = db.query(Task)
            if project_id is not None:
                query = query.filter(Task.project_id == project_id)
            if term:
                query = query.filter(_search_filter(term))
            return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def get_tasks_with_filters(self, project_id: Optional[int] = None, status: Any = None,
                               priority: Any = None, assignee: Optional[str] = None,
                               search: Optional[str] = None, overdue: Optional[bool] = None,
                               owner_id: Optional[int] = None) -> List[Task]:
        """组合条件查询任务，owner_id 限定为该用户拥有的项目中的任务"""
        with session_scope(self.session_factory) as db:
            query = db.query(Task)
            if owner_id is not None:
                query = query.join(Project, Task.project_id == Project.id).filter(Project.user_id == owner_id)
            if project_id is not None:
                query = query.filter(Task.project_id == project_id)
            if status is not None:
                query = query.filter(Task.status == self.validation.validate_status(status))
            if priority is not None:
                query = query.filter(Task.priority == self.validation.validate_priority(priority))
            if assignee is not None:
                query = query.filter(Task.assignee == assignee)
            if search and search.strip():
                query = query.filter(_search_filter(search.strip().lower()))
            if overdue:
                query = _overdue(query, date.today())
            return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def get_task_stats(self, project_id: Optional[int] = None) -> Dict[str, int]:
        """任务统计，所有计数在同一个会话中完成"""
        today = date.today()
        with session_scope(self.session_factory) as db:
            def scoped() -> Query:
                query = db.query(Task)
                if project_id is not None:
                    query = query.filter(Task.project_id == project_id)
                return query

            stats = {
                "total": scoped().count(),
                "todo": scoped().filter(Task.status == TaskStatus.TODO).count(),
                "in_progress": scoped().filter(Task.status == TaskStatus.IN_PROGRESS).count(),
                "completed": scoped().filter(Task.status == TaskStatus.COMPLETED).count(),
                "on_hold": scoped().filter(Task.status == TaskStatus.ON_HOLD).count(),
                "overdue": _overdue(scoped(), today).count(),
            }
        return stats
