from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from schemas import (
    AssignRequest, BaseResponse, ChangeLogResponse, MoveRequest, TaskCreate,
    TaskProgressUpdate, TaskResponse, TaskStats, TaskStatusChangeRequest, TaskUpdate
)
from services.container import Services, get_services
from services.status_transitions import get_allowed_transitions
from utils.auth import get_current_principal
from utils.permissions import Principal

router = APIRouter()


def _task_list(tasks):
    return [TaskResponse.model_validate(task) for task in tasks]


def _ensure_project_visible(services: Services, project_id: int, principal: Principal) -> None:
    """非管理员只能查看自己项目下的任务"""
    services.project_queries.get_project_by_id(project_id, principal.owner_scope)

# 任务列表
@router.get("", response_model=BaseResponse)
def get_tasks(
    project_id: Optional[int] = Query(None, description="项目ID"),
    status_filter: Optional[str] = Query(None, alias="status", description="任务状态"),
    priority: Optional[str] = Query(None, description="任务优先级"),
    assignee: Optional[str] = Query(None, description="负责人"),
    keyword: Optional[str] = Query(None, description="关键词搜索"),
    overdue: Optional[bool] = Query(None, description="只返回逾期任务"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取当前用户项目中的任务"""
    tasks = services.task_queries.get_tasks_with_filters(
        project_id=project_id,
        status=status_filter,
        priority=priority,
        assignee=assignee,
        search=keyword,
        overdue=overdue,
        owner_id=principal.user_id,
    )
    return BaseResponse(message="获取任务列表成功", data=_task_list(tasks))

@router.get("/stats", response_model=BaseResponse)
def get_task_stats(
    project_id: int = Query(..., description="项目ID"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """项目任务统计"""
    _ensure_project_visible(services, project_id, principal)
    stats = services.task_queries.get_task_stats(project_id)
    return BaseResponse(message="获取任务统计成功", data=TaskStats(**stats))

@router.get("/overdue", response_model=BaseResponse)
def get_overdue_tasks(
    project_id: int = Query(..., description="项目ID"),
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """逾期任务"""
    _ensure_project_visible(services, project_id, principal)
    tasks = services.task_queries.get_overdue_tasks(project_id)
    return BaseResponse(message="获取逾期任务成功", data=_task_list(tasks))

# 创建任务
@router.post("", response_model=BaseResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """在项目中创建任务"""
    task = services.tasks.create_task(task_data.project_id, task_data, principal)
    return BaseResponse(code="201", message="任务创建成功", data=TaskResponse.model_validate(task))

@router.get("/{task_id}", response_model=BaseResponse)
def get_task(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取任务详情，附带当前状态可流转到的状态"""
    task = services.task_queries.get_task_by_id(task_id)
    _ensure_project_visible(services, task.project_id, principal)
    data = TaskResponse.model_validate(task).model_dump(mode="json")
    data["allowed_transitions"] = [item.value for item in get_allowed_transitions(task.status)]
    return BaseResponse(message="获取任务详情成功", data=data)

@router.put("/{task_id}", response_model=BaseResponse)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """更新任务"""
    task = services.tasks.update_task(task_id, task_data, principal)
    return BaseResponse(message="任务更新成功", data=TaskResponse.model_validate(task))

@router.put("/{task_id}/status", response_model=BaseResponse)
def change_task_status(
    task_id: int,
    status_data: TaskStatusChangeRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """变更任务状态并记录变更日志"""
    task = services.tasks.change_task_status(task_id, status_data.status, status_data.remark, principal)
    return BaseResponse(message="任务状态变更成功", data=TaskResponse.model_validate(task))

@router.put("/{task_id}/progress", response_model=BaseResponse)
def update_task_progress(
    task_id: int,
    progress_data: TaskProgressUpdate,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """更新任务进度"""
    task = services.tasks.update_task_progress(task_id, progress_data.progress, principal)
    return BaseResponse(message="任务进度更新成功", data=TaskResponse.model_validate(task))

@router.put("/{task_id}/assign", response_model=BaseResponse)
def assign_task(
    task_id: int,
    assign_data: AssignRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """分配任务"""
    task = services.tasks.assign_task(task_id, assign_data.assignee, principal)
    return BaseResponse(message="任务分配成功", data=TaskResponse.model_validate(task))

@router.delete("/{task_id}/assign", response_model=BaseResponse)
def unassign_task(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """取消任务分配"""
    task = services.tasks.unassign_task(task_id, principal)
    return BaseResponse(message="已取消任务分配", data=TaskResponse.model_validate(task))

@router.put("/{task_id}/move", response_model=BaseResponse)
def move_task(
    task_id: int,
    move_data: MoveRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """把任务移动到另一个项目"""
    task = services.tasks.move_task_to_project(task_id, move_data.target_project_id, principal.user_id)
    return BaseResponse(message="任务移动成功", data=TaskResponse.model_validate(task))

@router.delete("/{task_id}", response_model=BaseResponse)
def delete_task(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """删除任务及其变更日志"""
    plan = services.tasks.delete_task(task_id, principal.user_id, principal.roles)
    return BaseResponse(message="任务删除成功", data=plan.to_dict())

@router.get("/{task_id}/changelogs", response_model=BaseResponse)
def get_task_changelogs(
    task_id: int,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取任务的变更日志"""
    task = services.task_queries.get_task_by_id(task_id)
    _ensure_project_visible(services, task.project_id, principal)
    changelogs = services.changelogs.get_changelogs_by_task(task_id)
    return BaseResponse(
        message="获取变更日志成功",
        data=[ChangeLogResponse.model_validate(log) for log in changelogs]
    )
