"""auth tokens: password_reset_tokens, refresh_tokens

Revision ID: 0002_auth_tokens
Revises: 0001_initial_schema
Create Date: 2026-10-20 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0002_auth_tokens'
down_revision = '0001_initial_schema'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'password_reset_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, comment='令牌ID'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, comment='用户ID'),
        sa.Column('token_hash', sa.String(length=64), nullable=False, comment='令牌摘要'),
        sa.Column('expires_at', sa.DateTime(), nullable=False, comment='过期时间'),
        sa.Column('used', sa.Boolean(), nullable=False, comment='是否已使用'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
    )
    op.create_index('ix_password_reset_tokens_id', 'password_reset_tokens', ['id'])
    op.create_index('ix_password_reset_tokens_user_id', 'password_reset_tokens', ['user_id'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True, comment='令牌ID'),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.user_id'), nullable=False, comment='用户ID'),
        sa.Column('token_hash', sa.String(length=64), nullable=False, comment='令牌摘要'),
        sa.Column('expires_at', sa.DateTime(), nullable=True, comment='过期时间，为空表示不过期'),
        sa.Column('revoked', sa.Boolean(), nullable=False, comment='是否已吊销'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='创建时间'),
    )
    op.create_index('ix_refresh_tokens_id', 'refresh_tokens', ['id'])
    op.create_index('ix_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])
    op.create_index('ix_refresh_tokens_token_hash', 'refresh_tokens', ['token_hash'], unique=True)


def downgrade() -> None:
    op.drop_table('refresh_tokens')
    op.drop_table('password_reset_tokens')
