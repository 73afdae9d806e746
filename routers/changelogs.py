from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from schemas import BaseResponse, ChangeLogCreate, ChangeLogResponse
from services.container import Services, get_services
from utils.auth import get_current_principal
from utils.permissions import Principal

router = APIRouter()


def _changelog_list(changelogs):
    return [ChangeLogResponse.model_validate(log) for log in changelogs]

@router.post("", response_model=BaseResponse, status_code=status.HTTP_201_CREATED)
def create_changelog(
    changelog_data: ChangeLogCreate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """手动添加变更日志，操作人为当前用户，只能为自己的任务或项目添加"""
    changelog = services.changelogs.create_changelog(
        task_id=changelog_data.task_id,
        project_id=changelog_data.project_id,
        user_id=principal.user_id,
        old_status=changelog_data.old_status,
        new_status=changelog_data.new_status,
        remark=changelog_data.remark,
        principal=principal,
    )
    return BaseResponse(code="201", message="变更日志创建成功", data=ChangeLogResponse.model_validate(changelog))

@router.get("", response_model=BaseResponse)
def get_changelogs(
    task_id: Optional[int] = Query(None, description="任务ID"),
    project_id: Optional[int] = Query(None, description="项目ID"),
    user_id: Optional[int] = Query(None, description="操作人ID，仅管理员可指定"),
    from_date: Optional[date] = Query(None, description="开始日期"),
    to_date: Optional[date] = Query(None, description="结束日期（包含当天）"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """按条件查询变更日志，非管理员只能查询自己的操作记录"""
    if not principal.is_admin:
        user_id = principal.user_id
    changelogs = services.changelogs.get_all_changelogs(
        task_id=task_id,
        project_id=project_id,
        user_id=user_id,
        from_date=from_date,
        to_date=to_date,
    )
    return BaseResponse(message="获取变更日志成功", data=_changelog_list(changelogs))

@router.get("/me", response_model=BaseResponse)
def get_my_changelogs(
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """当前用户的操作记录"""
    changelogs = services.changelogs.get_changelogs_by_user(principal.user_id)
    return BaseResponse(message="获取变更日志成功", data=_changelog_list(changelogs))
