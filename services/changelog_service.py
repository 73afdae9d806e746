"""变更日志服务模块

变更日志只追加，不提供更新和删除操作。
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import sessionmaker

from models import ChangeLog, Project, ProjectStatus, Task, TaskStatus, User, session_scope
from utils.exceptions import PermissionException, ResourceNotFoundException, ValidationException
from utils.permissions import Principal, validate_ownership
from .status_transitions import validate_transition

logger = logging.getLogger(__name__)


def validate_remark(remark: Any) -> str:
    """校验备注：必填且不能为空"""
    if not isinstance(remark, str) or not remark.strip():
        raise ValidationException("备注不能为空")
    return remark.strip()


def _status_value(value: Any, allowed, label: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, allowed):
        return value.value
    try:
        return allowed(value).value
    except ValueError:
        options = [member.value for member in allowed]
        raise ValidationException(
            f"无效的{label}，可选值: {', '.join(options)}",
            data={"value": value, "allowed": options},
        )


def _day_start(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


class ChangelogService:
    """变更日志服务类"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create_changelog(self, task_id: Optional[int] = None, project_id: Optional[int] = None,
                         user_id: Optional[int] = None, old_status: Any = None,
                         new_status: Any = None, remark: Any = None,
                         principal: Optional[Principal] = None) -> ChangeLog:
        """创建变更日志

        task_id 和 project_id 至少提供一个；提供 task_id 时按任务状态校验，
        否则按项目状态校验。new_status 必须是任务/项目的当前状态，
        任务日志的 old_status -> new_status 必须符合状态流转表。
        传入 principal 时要求其拥有所属项目（任务日志按任务所在项目判断）。
        """
        if task_id is None and project_id is None:
            raise ValidationException("任务ID和项目ID至少需要提供一个")
        remark = validate_remark(remark)

        if task_id is not None:
            old_value = _status_value(old_status, TaskStatus, "任务状态")
            new_value = _status_value(new_status, TaskStatus, "任务状态")
        else:
            old_value = _status_value(old_status, ProjectStatus, "项目状态")
            new_value = _status_value(new_status, ProjectStatus, "项目状态")

        with session_scope(self.session_factory) as db:
            task = None
            if task_id is not None:
                task = db.query(Task).filter(Task.id == task_id).first()
                if not task:
                    raise ResourceNotFoundException(message=f"任务 {task_id} 不存在")
                if project_id is not None and task.project_id != project_id:
                    raise ValidationException(f"任务 {task_id} 不属于项目 {project_id}")

            owning_project_id = task.project_id if task is not None else project_id
            project = db.query(Project).filter(Project.id == owning_project_id).first()
            if not project:
                raise ResourceNotFoundException(message=f"项目 {owning_project_id} 不存在")
            if principal is not None and not validate_ownership(project, principal.user_id, principal.roles):
                raise PermissionException("无权限为此任务或项目添加变更日志")

            if user_id is not None:
                if not db.query(User).filter(User.user_id == user_id).first():
                    raise ResourceNotFoundException(message=f"用户 {user_id} 不存在")

            current = task.status.value if task is not None else project.status.value
            self._check_recorded_status(task is not None, current, old_value, new_value)

            changelog = ChangeLog(
                task_id=task_id,
                project_id=project_id,
                user_id=user_id,
                old_status=old_value,
                new_status=new_value,
                remark=remark,
            )
            db.add(changelog)
            db.flush()
            db.refresh(changelog)

            logger.info(f"变更日志已创建: id={changelog.id} task={task_id} project={project_id}")
            return changelog

    @staticmethod
    def _check_recorded_status(is_task: bool, current: str, old_value: Optional[str],
                               new_value: Optional[str]) -> None:
        """日志中的状态必须与实体的实际状态一致"""
        if new_value is not None and new_value != current:
            raise ValidationException(
                f"变更后状态 {new_value} 与当前状态 {current} 不一致",
                data={"current": current, "requested": new_value},
            )
        if is_task and old_value is not None and new_value is not None and old_value != new_value:
            if not validate_transition(old_value, new_value):
                raise ValidationException(
                    f"任务状态不能从 {old_value} 变更为 {new_value}",
                    data={"current": old_value, "requested": new_value},
                )

    def get_changelogs_by_task(self, task_id: int) -> List[ChangeLog]:
        """获取任务的变更日志"""
        return self.get_all_changelogs(task_id=task_id)

    def get_changelogs_by_project(self, project_id: int, include_tasks: bool = False) -> List[ChangeLog]:
        """获取项目的变更日志

        include_tasks 为 True 时同时返回项目下任务的变更日志。
        """
        with session_scope(self.session_factory) as db:
            query = db.query(ChangeLog)
            if include_tasks:
                task_ids = select(Task.id).where(Task.project_id == project_id)
                query = query.filter(or_(
                    ChangeLog.project_id == project_id,
                    ChangeLog.task_id.in_(task_ids),
                ))
            else:
                query = query.filter(ChangeLog.project_id == project_id)
            return query.order_by(ChangeLog.created_at.desc(), ChangeLog.id.desc()).all()

    def get_changelogs_by_user(self, user_id: int) -> List[ChangeLog]:
        return self.get_all_changelogs(user_id=user_id)

    def get_all_changelogs(self, task_id: Optional[int] = None, project_id: Optional[int] = None,
                           user_id: Optional[int] = None, from_date: Optional[date] = None,
                           to_date: Optional[date] = None) -> List[ChangeLog]:
        """按条件筛选变更日志，结束日期包含当天"""
        with session_scope(self.session_factory) as db:
            query = db.query(ChangeLog)
            if task_id is not None:
                query = query.filter(ChangeLog.task_id == task_id)
            if project_id is not None:
                query = query.filter(ChangeLog.project_id == project_id)
            if user_id is not None:
                query = query.filter(ChangeLog.user_id == user_id)
            if from_date is not None:
                query = query.filter(ChangeLog.created_at >= _day_start(from_date))
            if to_date is not None:
                if isinstance(to_date, datetime):
                    query = query.filter(ChangeLog.created_at <= to_date)
                else:
                    query = query.filter(ChangeLog.created_at < _day_start(to_date) + timedelta(days=1))
            return query.order_by(ChangeLog.created_at.desc(), ChangeLog.id.desc()).all()
