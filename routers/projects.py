from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from schemas import (
    BaseResponse, DeletePlanResponse, ProgressUpdate, ProjectCreate, ProjectResponse,
    ProjectStats, ProjectUpdate, StatusChangeRequest, TaskResponse, ChangeLogResponse
)
from services.container import Services, get_services
from utils.auth import get_current_principal
from utils.permissions import Principal

router = APIRouter()


def _project_list(projects):
    return [ProjectResponse.model_validate(project) for project in projects]

# 项目列表
@router.get("", response_model=BaseResponse)
def get_projects(
    status_filter: Optional[str] = Query(None, alias="status", description="项目状态"),
    priority: Optional[str] = Query(None, description="项目优先级"),
    archived: Optional[bool] = Query(None, description="是否已归档"),
    keyword: Optional[str] = Query(None, description="关键词搜索"),
    overdue: Optional[bool] = Query(None, description="只返回逾期项目"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取当前用户的项目列表"""
    projects = services.project_queries.get_projects_with_filters(
        principal.user_id,
        status=status_filter,
        priority=priority,
        archived=archived,
        search=keyword,
        overdue=overdue,
    )
    return BaseResponse(message="获取项目列表成功", data=_project_list(projects))

@router.get("/stats", response_model=BaseResponse)
def get_project_stats(
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """项目统计"""
    stats = services.project_queries.get_project_stats(principal.user_id)
    return BaseResponse(message="获取项目统计成功", data=ProjectStats(**stats))

@router.get("/archived", response_model=BaseResponse)
def get_archived_projects(
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """已归档项目"""
    projects = services.project_queries.get_archived_projects(principal.user_id)
    return BaseResponse(message="获取归档项目成功", data=_project_list(projects))

@router.get("/overdue", response_model=BaseResponse)
def get_overdue_projects(
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """逾期项目"""
    projects = services.project_queries.get_overdue_projects(principal.user_id)
    return BaseResponse(message="获取逾期项目成功", data=_project_list(projects))

# 创建项目
@router.post("", response_model=BaseResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_data: ProjectCreate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """创建项目，当前用户为项目所有者"""
    project = services.projects.create_project(principal.user_id, project_data)
    return BaseResponse(code="201", message="项目创建成功", data=ProjectResponse.model_validate(project))

# 项目详情
@router.get("/{project_id}", response_model=BaseResponse)
def get_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取项目详情"""
    project = services.project_queries.get_project_by_id(project_id, principal.owner_scope)
    return BaseResponse(message="获取项目详情成功", data=ProjectResponse.model_validate(project))

@router.put("/{project_id}", response_model=BaseResponse)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """更新项目"""
    project = services.projects.update_project(project_id, project_data, principal)
    return BaseResponse(message="项目更新成功", data=ProjectResponse.model_validate(project))

@router.put("/{project_id}/progress", response_model=BaseResponse)
def update_project_progress(
    project_id: int,
    progress_data: ProgressUpdate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """更新项目进度"""
    project = services.projects.update_project_progress(project_id, progress_data.progress, principal)
    return BaseResponse(message="项目进度更新成功", data=ProjectResponse.model_validate(project))

@router.put("/{project_id}/status", response_model=BaseResponse)
def change_project_status(
    project_id: int,
    status_data: StatusChangeRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """变更项目状态并记录变更日志"""
    project = services.projects.change_project_status(
        project_id, status_data.status, status_data.remark, principal
    )
    return BaseResponse(message="项目状态变更成功", data=ProjectResponse.model_validate(project))

@router.post("/{project_id}/archive", response_model=BaseResponse)
def archive_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """归档项目"""
    project = services.projects.archive_project(project_id, principal)
    return BaseResponse(message="项目已归档", data=ProjectResponse.model_validate(project))

@router.post("/{project_id}/unarchive", response_model=BaseResponse)
def unarchive_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """取消归档"""
    project = services.projects.unarchive_project(project_id, principal)
    return BaseResponse(message="项目已取消归档", data=ProjectResponse.model_validate(project))

@router.get("/{project_id}/delete-plan", response_model=BaseResponse)
def get_delete_plan(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """预演删除：返回删除项目时会一并删除的记录"""
    plan = services.projects.plan_project_delete(project_id, principal)
    return BaseResponse(message="获取删除计划成功", data=DeletePlanResponse(**plan.to_dict()))

@router.delete("/{project_id}", response_model=BaseResponse)
def delete_project(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """删除项目及其任务和变更日志"""
    plan = services.projects.delete_project(project_id, principal.user_id, principal.roles)
    return BaseResponse(message="项目删除成功", data=DeletePlanResponse(**plan.to_dict()))

@router.get("/{project_id}/tasks", response_model=BaseResponse)
def get_project_tasks(
    project_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取项目下的任务"""
    services.project_queries.get_project_by_id(project_id, principal.owner_scope)
    tasks = services.task_queries.get_tasks_by_project_id(project_id)
    return BaseResponse(
        message="获取任务列表成功",
        data=[TaskResponse.model_validate(task) for task in tasks]
    )

@router.get("/{project_id}/changelogs", response_model=BaseResponse)
def get_project_changelogs(
    project_id: int,
    include_tasks: bool = Query(False, description="是否包含任务的变更日志"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取项目的变更日志"""
    services.project_queries.get_project_by_id(project_id, principal.owner_scope)
    changelogs = services.changelogs.get_changelogs_by_project(project_id, include_tasks=include_tasks)
    return BaseResponse(
        message="获取变更日志成功",
        data=[ChangeLogResponse.model_validate(log) for log in changelogs]
    )
