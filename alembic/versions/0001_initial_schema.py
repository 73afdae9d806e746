"""initial schema: users, projects, tasks, change_logs

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

PROJECT_PRIORITY = ('Low', 'Medium', 'High')
PROJECT_STATUS = ('In Progress', 'To Review', 'Completed', 'On Hold', 'Request Changes')
TASK_PRIORITY = ('Low', 'Medium', 'High', 'Critical')
TASK_STATUS = ('Todo', 'In Progress', 'Done', 'On Hold', 'Request Changes')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('user_id', sa.Integer(), primary_key=True, autoincrement=True, comment='用户ID'),
        sa.Column('email', sa.String(length=100), nullable=False, comment='邮箱地址，唯一标识'),
        sa.Column('password', sa.String(length=255), nullable=False, comment='密码哈希值'),
        sa.Column('first_name', sa.String(length=100), nullable=True, comment='名'),
        sa.Column('last_name', sa.String(length=100), nullable=True, comment='姓'),
        sa.Column('roles', sa.Text(), nullable=True, comment='用户角色JSON字符串'),
        sa.Column('is_active', sa.Boolean(), nullable=False, comment='是否激活状态'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, comment='更新时间'),
    )
    op.create_index('ix_users_user_id', 'users', ['user_id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, comment='项目ID'),
        sa.Column('name', sa.String(length=200), nullable=False, comment='项目名称'),
        sa.Column('description', sa.Text(), nullable=True, comment='项目描述'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, comment='项目所有者ID'),
        sa.Column('priority', sa.Enum(*PROJECT_PRIORITY, name='project_priority'), nullable=False, comment='项目优先级'),
        sa.Column('status', sa.Enum(*PROJECT_STATUS, name='project_status'), nullable=False, comment='项目状态'),
        sa.Column('due_date', sa.Date(), nullable=True, comment='截止日期'),
        sa.Column('progress', sa.Integer(), nullable=False, comment='进度，0-100'),
        sa.Column('archived', sa.Boolean(), nullable=False, comment='是否已归档'),
        sa.Column('archived_at', sa.DateTime(), nullable=True, comment='归档时间，仅在已归档时有值'),
        sa.Column('version', sa.Integer(), nullable=False, comment='乐观锁版本号'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, comment='更新时间'),
    )
    op.create_index('ix_projects_id', 'projects', ['id'])
    op.create_index('ix_projects_user_id', 'projects', ['user_id'])

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, comment='任务ID'),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id'), nullable=False, comment='任务所属项目ID'),
        sa.Column('name', sa.String(length=200), nullable=False, comment='任务名称'),
        sa.Column('contents', sa.Text(), nullable=True, comment='任务内容'),
        sa.Column('status', sa.Enum(*TASK_STATUS, name='task_status'), nullable=False, comment='任务状态'),
        sa.Column('priority', sa.Enum(*TASK_PRIORITY, name='task_priority'), nullable=False, comment='任务优先级'),
        sa.Column('due_date', sa.Date(), nullable=True, comment='截止日期'),
        sa.Column('assignee', sa.String(length=100), nullable=True, comment='任务负责人'),
        sa.Column('progress', sa.Integer(), nullable=False, comment='进度，0-100'),
        sa.Column('version', sa.Integer(), nullable=False, comment='乐观锁版本号'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, comment='更新时间'),
    )
    op.create_index('ix_tasks_id', 'tasks', ['id'])
    op.create_index('ix_tasks_project_id', 'tasks', ['project_id'])

    op.create_table(
        'change_logs',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, comment='变更日志ID'),
        sa.Column('task_id', sa.Integer(), sa.ForeignKey('tasks.id'), nullable=True, comment='关联任务ID'),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id'), nullable=True, comment='关联项目ID'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=True, comment='操作人ID'),
        sa.Column('old_status', sa.String(length=50), nullable=True, comment='变更前状态'),
        sa.Column('new_status', sa.String(length=50), nullable=True, comment='变更后状态'),
        sa.Column('remark', sa.Text(), nullable=False, comment='备注'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
    )
    op.create_index('ix_change_logs_id', 'change_logs', ['id'])
    op.create_index('ix_change_logs_task_id', 'change_logs', ['task_id'])
    op.create_index('ix_change_logs_project_id', 'change_logs', ['project_id'])


def downgrade() -> None:
    op.drop_table('change_logs')
    op.drop_table('tasks')
    op.drop_table('projects')
    op.drop_table('users')
    # PostgreSQL 的枚举类型需要单独删除
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in ('task_priority', 'task_status', 'project_status', 'project_priority'):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
