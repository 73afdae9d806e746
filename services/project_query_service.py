"""项目查询服务模块

所有查询都限定在某个所有者的项目范围内，只读。
"""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session, selectinload, sessionmaker

from models import Project, ProjectStatus, session_scope
from utils.exceptions import ResourceNotFoundException
from .project_validation_service import ProjectValidationService


class ProjectQueryService:
    """项目查询服务类"""

    def __init__(self, session_factory: sessionmaker,
                 validation_service: Optional[ProjectValidationService] = None):
        self.session_factory = session_factory
        self.validation = validation_service or ProjectValidationService()

    @staticmethod
    def _owned(db: Session, user_id: int) -> Query:
        return db.query(Project).filter(Project.user_id == user_id)

    @staticmethod
    def _overdue_filter(query: Query, as_of: date) -> Query:
        return query.filter(
            Project.due_date.isnot(None),
            Project.due_date < as_of,
            Project.status != ProjectStatus.COMPLETED,
            Project.archived.is_(False),
        )

    def get_projects_by_user(self, user_id: int) -> List[Project]:
        """获取用户的所有项目，最新创建的在前"""
        with session_scope(self.session_factory) as db:
            return self._owned(db, user_id).order_by(Project.created_at.desc(), Project.id.desc()).all()

    def get_project_by_id(self, project_id: int, user_id: Optional[int] = None) -> Project:
        """获取项目详情（包含任务）

        user_id 为 None 时不限定所有者，供管理员查看任意项目。
        """
        with session_scope(self.session_factory) as db:
            query = db.query(Project) if user_id is None else self._owned(db, user_id)
            project = (
                query
                .options(selectinload(Project.tasks))
                .filter(Project.id == project_id)
                .first()
            )
            if not project:
                raise ResourceNotFoundException(message=f"项目 {project_id} 不存在")
            return project

    def get_projects_by_status(self, user_id: int, status: Any) -> List[Project]:
        status = self.validation.validate_status(status)
        with session_scope(self.session_factory) as db:
            return (
                self._owned(db, user_id)
                .filter(Project.status == status)
                .order_by(Project.updated_at.desc(), Project.id.desc())
                .all()
            )

    def get_projects_by_priority(self, user_id: int, priority: Any) -> List[Project]:
        """按优先级获取项目，截止日期近的在前，无截止日期的排最后"""
        priority = self.validation.validate_priority(priority)
        with session_scope(self.session_factory) as db:
            return (
                self._owned(db, user_id)
                .filter(Project.priority == priority)
                .order_by(Project.due_date.is_(None), Project.due_date.asc(), Project.id.asc())
                .all()
            )

    def get_archived_projects(self, user_id: int) -> List[Project]:
        with session_scope(self.session_factory) as db:
            return (
                self._owned(db, user_id)
                .filter(Project.archived.is_(True))
                .order_by(Project.archived_at.desc(), Project.id.desc())
                .all()
            )

    def get_active_projects(self, user_id: int) -> List[Project]:
        with session_scope(self.session_factory) as db:
            return (
                self._owned(db, user_id)
                .filter(Project.archived.is_(False))
                .order_by(Project.created_at.desc(), Project.id.desc())
                .all()
            )

    def get_overdue_projects(self, user_id: int, as_of: Optional[date] = None) -> List[Project]:
        """获取逾期项目：截止日期早于今天、未完成且未归档"""
        as_of = as_of or date.today()
        with session_scope(self.session_factory) as db:
            return (
                self._overdue_filter(self._owned(db, user_id), as_of)
                .order_by(Project.due_date.asc(), Project.id.asc())
                .all()
            )

    def search_projects(self, user_id: int, term: str) -> List[Project]:
        """按名称或描述搜索项目（不区分大小写）"""
        term = (term or "").strip().lower()
        with session_scope(self.session_factory) as db:
            query = self._owned(db, user_id)
            if term:
                query = query.filter(or_(
                    func.lower(Project.name).contains(term, autoescape=True),
                    func.lower(Project.description).contains(term, autoescape=True),
                ))
            return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    def get_projects_with_filters(self, user_id: int, status: Any = None, priority: Any = None,
                                  archived: Optional[bool] = None, search: Optional[str] = None,
                                  overdue: Optional[bool] = None) -> List[Project]:
        """组合条件查询项目"""
        with session_scope(self.session_factory) as db:
            query = self._owned(db, user_id)
            if status is not None:
                query = query.filter(Project.status == self.validation.validate_status(status))
            if priority is not None:
                query = query.filter(Project.priority == self.validation.validate_priority(priority))
            if archived is not None:
                query = query.filter(Project.archived.is_(archived))
            if search and search.strip():
                term = search.strip().lower()
                query = query.filter(or_(
                    func.lower(Project.name).contains(term, autoescape=True),
                    func.lower(Project.description).contains(term, autoescape=True),
                ))
            if overdue:
                query = self._overdue_filter(query, date.today())
            return query.order_by(Project.created_at.desc(), Project.id.desc()).all()

    def get_project_stats(self, user_id: int) -> Dict[str, int]:
        """项目统计，所有计数在同一个会话中完成"""
        today = date.today()
        with session_scope(self.session_factory) as db:
            total = self._owned(db, user_id).count()
            in_progress = (
                self._owned(db, user_id)
                .filter(Project.status == ProjectStatus.IN_PROGRESS, Project.archived.is_(False))
                .count()
            )
            completed = self._owned(db, user_id).filter(Project.status == ProjectStatus.COMPLETED).count()
            archived = self._owned(db, user_id).filter(Project.archived.is_(True)).count()
            overdue = self._overdue_filter(self._owned(db, user_id), today).count()

        return {
            "total": total,
            "in_progress": in_progress,
            "completed": completed,
            "archived": archived,
            "overdue": overdue,
        }
