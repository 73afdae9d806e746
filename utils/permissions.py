"""权限检查工具模块
提供请求主体定义和所有权判定
"""
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """请求主体：由认证层解析出的用户ID与角色"""
    user_id: int
    roles: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return has_admin_permission(self.roles)

    @property
    def owner_scope(self) -> Optional[int]:
        """读取时的所有者范围，管理员不受限制（None）"""
        return None if self.is_admin else self.user_id


def has_admin_permission(roles: Sequence[str]) -> bool:
    """检查角色列表是否包含管理员"""
    return UserRole.ADMIN.value in (roles or [])


def get_owner_id(entity: Any) -> Any:
    """获取实体所有者ID，支持ORM对象和字典"""
    if isinstance(entity, Mapping):
        return entity.get("user_id")
    return getattr(entity, "user_id", None)


def validate_ownership(entity: Any, requesting_user_id: int, roles: Sequence[str] = ()) -> bool:
    """判断请求者是否可以修改实体

    管理员可以修改任何实体；其他用户只能修改自己拥有的实体。
    纯函数，无副作用。
    """
    if has_admin_permission(roles):
        return True
    owner_id = get_owner_id(entity)
    return owner_id is not None and owner_id == requesting_user_id
