from fastapi import APIRouter, Depends

from schemas import BaseResponse, RolesUpdateRequest, UserResponse
from services.container import Services, get_services
from utils.auth import require_admin
from utils.permissions import Principal

router = APIRouter()

# 用户管理接口仅管理员可用

@router.get("/{user_id}", response_model=BaseResponse)
def get_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    services: Services = Depends(get_services)
):
    """获取用户详情"""
    user = services.users.find_by_id(user_id)
    return BaseResponse(message="获取用户成功", data=UserResponse.from_user(user))

@router.put("/{user_id}/roles", response_model=BaseResponse)
def set_user_roles(
    user_id: int,
    roles_data: RolesUpdateRequest,
    admin: Principal = Depends(require_admin),
    services: Services = Depends(get_services)
):
    """设置用户角色"""
    user = services.users.set_user_roles(user_id, roles_data.roles)
    return BaseResponse(message="角色更新成功", data=UserResponse.from_user(user))

@router.post("/{user_id}/activate", response_model=BaseResponse)
def activate_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    services: Services = Depends(get_services)
):
    """启用用户"""
    user = services.users.activate_user(user_id)
    return BaseResponse(message="用户已启用", data=UserResponse.from_user(user))

@router.post("/{user_id}/deactivate", response_model=BaseResponse)
def deactivate_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    services: Services = Depends(get_services)
):
    """禁用用户"""
    user = services.users.deactivate_user(user_id)
    return BaseResponse(message="用户已禁用", data=UserResponse.from_user(user))
