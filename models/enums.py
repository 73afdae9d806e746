"""
枚举定义模块
包含系统中所有的枚举类型定义
"""
import enum


class TaskStatus(str, enum.Enum):
    """任务状态枚举"""
    TODO = "Todo"                          # 待办
    IN_PROGRESS = "In Progress"            # 进行中
    COMPLETED = "Done"                     # 已完成
    ON_HOLD = "On Hold"                    # 暂停
    REQUEST_CHANGES = "Request Changes"    # 需要修改


class TaskPriority(str, enum.Enum):
    """任务优先级枚举"""
    LOW = "Low"            # 低优先级
    MEDIUM = "Medium"      # 中等优先级
    HIGH = "High"          # 高优先级
    CRITICAL = "Critical"  # 关键


class ProjectStatus(str, enum.Enum):
    """项目状态枚举"""
    IN_PROGRESS = "In Progress"            # 进行中
    TO_REVIEW = "To Review"                # 待审核
    COMPLETED = "Completed"                # 已完成
    ON_HOLD = "On Hold"                    # 暂停
    REQUEST_CHANGES = "Request Changes"    # 需要修改


class ProjectPriority(str, enum.Enum):
    """项目优先级枚举"""
    LOW = "Low"        # 低优先级
    MEDIUM = "Medium"  # 中等优先级
    HIGH = "High"      # 高优先级


class UserRole(str, enum.Enum):
    """用户角色枚举"""
    ADMIN = "admin"    # 系统管理员
    MEMBER = "member"  # 普通成员
