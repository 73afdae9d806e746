"""项目管理服务模块

包含项目创建、更新、归档、删除等写操作的业务逻辑
"""
import logging
from typing import Any, Optional, Sequence

from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.orm import Session, sessionmaker

from models import ChangeLog, Project, User, session_scope
from models.base import utcnow
from utils.exceptions import PermissionException, ResourceNotFoundException
from utils.permissions import Principal
from .changelog_service import validate_remark
from .delete_plan import DeletePlan, build_project_delete_plan, execute_delete_plan
from .project_validation_service import ProjectValidationService
from .validation_service import to_field_dict

logger = logging.getLogger(__name__)

STATUS_UPDATE_REMARK = "通过项目更新修改状态"


class ProjectManagementService:
    """项目管理服务类"""

    def __init__(self, session_factory: sessionmaker,
                 validation_service: Optional[ProjectValidationService] = None):
        self.session_factory = session_factory
        self.validation = validation_service or ProjectValidationService()

    def _get_project(self, db: Session, project_id: int) -> Project:
        project = db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundException(message=f"项目 {project_id} 不存在")
        return project

    def _ensure_can_modify(self, project: Project, principal: Optional[Principal]) -> None:
        if principal is None:
            return
        if not self.validation.validate_ownership(project, principal.user_id, principal.roles):
            raise PermissionException("无权限修改此项目")

    def _reload(self, db: Session, project: Project) -> Project:
        """写入后重新读取项目，项目在此期间消失视为一致性错误"""
        db.flush()
        try:
            db.refresh(project)
        except InvalidRequestError:
            raise ResourceNotFoundException(message=f"项目 {project.id} 更新后不存在")
        return project

    def create_project(self, owner_id: int, data: Any) -> Project:
        """创建项目"""
        fields = {key: value for key, value in to_field_dict(data).items() if value is not None}
        validated = self.validation.validate_project_data(fields)

        with session_scope(self.session_factory) as db:
            owner = db.query(User).filter(User.user_id == owner_id).first()
            if not owner:
                raise ResourceNotFoundException(message=f"用户 {owner_id} 不存在")

            project = Project(user_id=owner_id, description="", archived=False)
            self._apply_fields(project, validated)
            db.add(project)
            project = self._reload(db, project)

            logger.info(f"项目已创建: id={project.id} owner={owner_id} name={project.name!r}")
            return project

    def _apply_fields(self, project: Project, validated: dict) -> None:
        for field_name, value in validated.items():
            setattr(project, field_name, value)
            if field_name == "archived":
                project.archived_at = utcnow() if value else None

    def update_project(self, project_id: int, update_data: Any,
                       principal: Optional[Principal] = None) -> Project:
        """更新项目

        只更新显式提供的字段；due_date 为 None 时清除截止日期；
        archived 为 True 时记录归档时间，为 False 时清除归档时间；
        状态实际变更时追加一条变更日志。
        """
        validated = self.validation.validate_project_data(to_field_dict(update_data), partial=True)

        with session_scope(self.session_factory) as db:
            project = self._get_project(db, project_id)
            self._ensure_can_modify(project, principal)

            old_status = project.status
            if validated.get("status") == old_status:
                validated.pop("status")
            self._apply_fields(project, validated)
            if "status" in validated:
                db.add(ChangeLog(
                    project_id=project.id,
                    user_id=principal.user_id if principal else None,
                    old_status=old_status.value,
                    new_status=project.status.value,
                    remark=STATUS_UPDATE_REMARK,
                ))
            project = self._reload(db, project)

            if validated:
                logger.info(f"项目已更新: id={project_id} fields={sorted(validated)}")
            return project

    def delete_project(self, project_id: int, requesting_user_id: int,
                       requesting_user_roles: Sequence[str] = ()) -> DeletePlan:
        """删除项目及其所有任务和变更日志

        三步删除在同一事务中执行，任何一步失败整体回滚。
        """
        with session_scope(self.session_factory, action="删除项目") as db:
            project = self._get_project(db, project_id)
            if not self.validation.validate_ownership(project, requesting_user_id, requesting_user_roles):
                raise PermissionException("无权限删除此项目")

            plan = build_project_delete_plan(db, project_id)
            execute_delete_plan(db, plan)

        logger.info(
            f"项目已删除: id={project_id} by={requesting_user_id} "
            f"tasks={len(plan.task_ids)} changelogs={len(plan.changelog_ids)}"
        )
        return plan

    def plan_project_delete(self, project_id: int, principal: Optional[Principal] = None) -> DeletePlan:
        """预演删除：返回将被删除的记录，不做任何修改"""
        with session_scope(self.session_factory) as db:
            project = self._get_project(db, project_id)
            self._ensure_can_modify(project, principal)
            return build_project_delete_plan(db, project_id)

    def update_project_progress(self, project_id: int, progress: Any,
                                principal: Optional[Principal] = None) -> Project:
        return self.update_project(project_id, {"progress": progress}, principal)

    def archive_project(self, project_id: int, principal: Optional[Principal] = None) -> Project:
        return self.update_project(project_id, {"archived": True}, principal)

    def unarchive_project(self, project_id: int, principal: Optional[Principal] = None) -> Project:
        return self.update_project(project_id, {"archived": False}, principal)

    def change_project_status(self, project_id: int, new_status: Any, remark: Any,
                              principal: Principal) -> Project:
        """变更项目状态并记录变更日志（同一事务）"""
        status = self.validation.validate_status(new_status)
        remark = validate_remark(remark)

        with session_scope(self.session_factory, action="变更项目状态") as db:
            project = self._get_project(db, project_id)
            self._ensure_can_modify(project, principal)

            old_status = project.status
            if old_status == status:
                return project

            project.status = status
            db.add(ChangeLog(
                project_id=project.id,
                user_id=principal.user_id,
                old_status=old_status.value,
                new_status=status.value,
                remark=remark,
            ))
            project = self._reload(db, project)

            logger.info(f"项目状态变更: id={project_id} {old_status.value} -> {status.value}")
            return project
