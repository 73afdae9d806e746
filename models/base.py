"""模型基类模块

包含模型的混入类和时间工具
"""
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    """当前UTC时间（不带时区信息，与DateTime列保持一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def enum_values(enum_cls):
    """让SQLAlchemy的Enum列存储枚举值而不是枚举名"""
    return [member.value for member in enum_cls]


class TimestampMixin:
    """时间戳混入类"""

    created_at = Column(DateTime, default=utcnow, nullable=False, comment='创建时间')
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False, comment='更新时间')
