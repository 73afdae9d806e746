"""
变更日志模型模块
变更日志只追加，不更新；仅随所属任务/项目级联删除
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from .database import Base
from .base import utcnow


class ChangeLog(Base):
    """变更日志表模型"""
    __tablename__ = "change_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='变更日志ID')
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True, comment='关联任务ID')
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True, comment='关联项目ID')
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True, comment='操作人ID')
    old_status = Column(String(50), nullable=True, comment='变更前状态')
    new_status = Column(String(50), nullable=True, comment='变更后状态')
    remark = Column(Text, nullable=False, comment='备注')
    created_at = Column(DateTime, default=utcnow, nullable=False, comment='创建时间')

    def __repr__(self):
        return f"<ChangeLog id={self.id} task_id={self.task_id} project_id={self.project_id}>"
