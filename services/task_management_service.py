"""任务管理服务模块

包含任务创建、更新、分配、移动、删除等写操作的业务逻辑
"""
import logging
from typing import Any, Optional, Sequence

from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import Session, sessionmaker

from models import ChangeLog, Project, Task, TaskStatus, session_scope
from utils.exceptions import PermissionException, ResourceNotFoundException, ValidationException
from utils.permissions import Principal
from .changelog_service import validate_remark
from .delete_plan import DeletePlan, build_task_delete_plan, execute_delete_plan
from .status_transitions import get_allowed_transitions
from .task_validation_service import TaskValidationService
from .validation_service import to_field_dict

logger = logging.getLogger(__name__)

STATUS_UPDATE_REMARK = "通过任务更新修改状态"


class TaskManagementService:
    """任务管理服务类"""

    def __init__(self, session_factory: sessionmaker,
                 validation_service: Optional[TaskValidationService] = None):
        self.session_factory = session_factory
        self.validation = validation_service or TaskValidationService()

    def _get_task(self, db: Session, task_id: int) -> Task:
        task = db.query(Task).filter(Task.id == task_id).first()
        if not task:
            raise ResourceNotFoundException(message=f"任务 {task_id} 不存在")
        return task

    def _get_project(self, db: Session, project_id: int) -> Project:
        project = db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundException(message=f"项目 {project_id} 不存在")
        return project

    def _ensure_can_modify(self, db: Session, task: Task, principal: Optional[Principal]) -> None:
        if principal is None:
            return
        project = self._get_project(db, task.project_id)
        if not self.validation.validate_task_ownership(project.user_id, principal.user_id, principal.roles):
            raise PermissionException("无权限修改此任务")

    def _check_transition(self, current: TaskStatus, new: TaskStatus) -> None:
        if not self.validation.validate_task_transition(current, new):
            allowed = [status.value for status in get_allowed_transitions(current)]
            raise ValidationException(
                f"任务状态不能从 {current.value} 变更为 {new.value}",
                data={"current": current.value, "requested": new.value, "allowed": allowed},
            )

    def _reload(self, db: Session, task: Task) -> Task:
        db.flush()
        try:
            db.refresh(task)
        except InvalidRequestError:
            raise ResourceNotFoundException(message=f"任务 {task.id} 更新后不存在")
        return task

    def create_task(self, project_id: int, data: Any, principal: Optional[Principal] = None) -> Task:
        """创建任务，传入 principal 时要求其拥有目标项目"""
        fields = {key: value for key, value in to_field_dict(data).items() if value is not None}
        fields.pop("project_id", None)
        validated = self.validation.validate_task_data(fields)

        with session_scope(self.session_factory) as db:
            project = self._get_project(db, project_id)
            if principal is not None and not self.validation.validate_task_ownership(
                    project.user_id, principal.user_id, principal.roles):
                raise PermissionException("无权限在此项目中创建任务")

            task = Task(project_id=project_id, **validated)
            db.add(task)
            task = self._reload(db, task)

            logger.info(f"任务已创建: id={task.id} project={project_id} name={task.name!r}")
            return task

    def update_task(self, task_id: int, update_data: Any,
                    principal: Optional[Principal] = None) -> Task:
        """更新任务

        只更新显式提供的字段；状态变更需要符合状态流转表，
        设置为当前状态视为无变更，实际变更时追加一条变更日志。
        """
        validated = self.validation.validate_task_data(to_field_dict(update_data), partial=True)

        with session_scope(self.session_factory) as db:
            task = self._get_task(db, task_id)
            self._ensure_can_modify(db, task, principal)

            old_status = task.status
            new_status = validated.get("status")
            if new_status is not None:
                if new_status == old_status:
                    validated.pop("status")
                else:
                    self._check_transition(old_status, new_status)

            for field_name, value in validated.items():
                setattr(task, field_name, value)
            if "status" in validated:
                db.add(ChangeLog(
                    task_id=task.id,
                    user_id=principal.user_id if principal else None,
                    old_status=old_status.value,
                    new_status=new_status.value,
                    remark=STATUS_UPDATE_REMARK,
                ))
            task = self._reload(db, task)

            if validated:
                logger.info(f"任务已更新: id={task_id} fields={sorted(validated)}")
            return task

    def delete_task(self, task_id: int, requesting_user_id: int,
                    requesting_user_roles: Sequence[str] = ()) -> DeletePlan:
        """删除任务及其变更日志"""
        with session_scope(self.session_factory, action="删除任务") as db:
            task = self._get_task(db, task_id)
            project = self._get_project(db, task.project_id)
            if not self.validation.validate_task_ownership(
                    project.user_id, requesting_user_id, requesting_user_roles):
                raise PermissionException("无权限删除此任务")

            plan = build_task_delete_plan(db, task_id)
            execute_delete_plan(db, plan)

        logger.info(f"任务已删除: id={task_id} by={requesting_user_id} changelogs={len(plan.changelog_ids)}")
        return plan

    def assign_task(self, task_id: int, assignee: Any, principal: Optional[Principal] = None) -> Task:
        """分配任务负责人"""
        if self.validation.validate_assignee(assignee) is None:
            raise ValidationException("负责人不能为空")
        return self.update_task(task_id, {"assignee": assignee}, principal)

    def unassign_task(self, task_id: int, principal: Optional[Principal] = None) -> Task:
        return self.update_task(task_id, {"assignee": None}, principal)

    def update_task_progress(self, task_id: int, progress: Any,
                             principal: Optional[Principal] = None) -> Task:
        return self.update_task(task_id, {"progress": progress}, principal)

    def move_task_to_project(self, task_id: int, target_project_id: int, requesting_user_id: int) -> Task:
        """把任务移动到另一个项目，请求者必须同时拥有源项目和目标项目"""
        with session_scope(self.session_factory, action="移动任务") as db:
            task = self._get_task(db, task_id)
            source = self._get_project(db, task.project_id)
            target = self._get_project(db, target_project_id)

            if source.user_id != requesting_user_id or target.user_id != requesting_user_id:
                raise PermissionException("只能在自己拥有的项目之间移动任务")

            source_id = source.id
            task.project_id = target.id
            task = self._reload(db, task)

            logger.info(f"任务已移动: id={task_id} {source_id} -> {target_project_id}")
            return task

    def change_task_status(self, task_id: int, new_status: Any, remark: Any,
                           principal: Principal) -> Task:
        """变更任务状态并记录变更日志（同一事务）"""
        status = self.validation.validate_status(new_status)
        remark = validate_remark(remark)

        with session_scope(self.session_factory, action="变更任务状态") as db:
            task = self._get_task(db, task_id)
            self._ensure_can_modify(db, task, principal)

            old_status = task.status
            if old_status == status:
                return task
            self._check_transition(old_status, status)

            task.status = status
            db.add(ChangeLog(
                task_id=task.id,
                user_id=principal.user_id,
                old_status=old_status.value,
                new_status=status.value,
                remark=remark,
            ))
            task = self._reload(db, task)

            logger.info(f"任务状态变更: id={task_id} {old_status.value} -> {status.value}")
            return task
