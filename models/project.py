"""
项目模型模块
包含项目相关的数据模型定义
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .database import Base
from .base import TimestampMixin, enum_values
from .enums import ProjectStatus, ProjectPriority


class Project(Base, TimestampMixin):
    """项目表模型"""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='项目ID')
    name = Column(String(200), nullable=False, comment='项目名称')
    description = Column(Text, default="", comment='项目描述')
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True, comment='项目所有者ID')
    priority = Column(
        Enum(ProjectPriority, name="project_priority", values_callable=enum_values),
        default=ProjectPriority.MEDIUM, nullable=False, comment='项目优先级'
    )
    status = Column(
        Enum(ProjectStatus, name="project_status", values_callable=enum_values),
        default=ProjectStatus.IN_PROGRESS, nullable=False, comment='项目状态'
    )
    due_date = Column(Date, nullable=True, comment='截止日期')
    progress = Column(Integer, default=0, nullable=False, comment='进度，0-100')
    archived = Column(Boolean, default=False, nullable=False, comment='是否已归档')
    archived_at = Column(DateTime, nullable=True, comment='归档时间，仅在已归档时有值')
    version = Column(Integer, nullable=False, default=1, comment='乐观锁版本号')

    __mapper_args__ = {"version_id_col": version}

    # 关系
    owner = relationship("User", back_populates="projects")
    tasks = relationship("Task", back_populates="project")

    def __repr__(self):
        return f"<Project id={self.id} name={self.name!r} status={self.status}>"
