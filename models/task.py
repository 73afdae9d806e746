"""
任务模型模块
包含任务相关的数据模型定义
"""
from sqlalchemy import Column, Integer, String, Date, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .database import Base
from .base import TimestampMixin, enum_values
from .enums import TaskStatus, TaskPriority


class Task(Base, TimestampMixin):
    """任务表模型"""
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='任务ID')
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True, comment='任务所属项目ID')
    name = Column(String(200), nullable=False, comment='任务名称')
    contents = Column(Text, nullable=True, comment='任务内容')
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=enum_values),
        default=TaskStatus.TODO, nullable=False, comment='任务状态'
    )
    priority = Column(
        Enum(TaskPriority, name="task_priority", values_callable=enum_values),
        default=TaskPriority.MEDIUM, nullable=False, comment='任务优先级'
    )
    due_date = Column(Date, nullable=True, comment='截止日期')
    assignee = Column(String(100), nullable=True, comment='任务负责人')
    progress = Column(Integer, default=0, nullable=False, comment='进度，0-100')
    version = Column(Integer, nullable=False, default=1, comment='乐观锁版本号')

    __mapper_args__ = {"version_id_col": version}

    # 关系
    project = relationship("Project", back_populates="tasks")

    def __repr__(self):
        return f"<Task id={self.id} project_id={self.project_id} status={self.status}>"
