"""
用户模型模块
包含用户相关的数据模型定义
"""
import json
from sqlalchemy import Column, Integer, String, Boolean, Text
from sqlalchemy.orm import relationship
from .database import Base
from .base import TimestampMixin
from .enums import UserRole


class User(Base, TimestampMixin):
    """用户表模型"""
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='用户ID')
    email = Column(String(100), unique=True, index=True, nullable=False, comment='邮箱地址，唯一标识')
    password = Column(String(255), nullable=False, comment='密码哈希值')
    first_name = Column(String(100), comment='名')
    last_name = Column(String(100), comment='姓')
    roles = Column(Text, comment='用户角色JSON字符串')
    is_active = Column(Boolean, default=True, nullable=False, comment='是否激活状态')

    # 关系
    projects = relationship("Project", back_populates="owner")

    def get_roles(self) -> list:
        """获取角色列表"""
        raw = str(self.roles) if self.roles else ""
        if raw:
            try:
                value = json.loads(raw)
                if isinstance(value, list):
                    return [str(role) for role in value]
            except json.JSONDecodeError:
                pass
        return []

    def set_roles(self, roles) -> None:
        """设置角色列表"""
        self.roles = json.dumps(sorted(set(roles)), ensure_ascii=False)

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN.value in self.get_roles()
