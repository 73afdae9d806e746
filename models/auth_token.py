"""
认证令牌模型模块
密码重置令牌和刷新令牌只保存令牌的SHA-256摘要，不保存原文
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from .database import Base
from .base import utcnow


class PasswordResetToken(Base):
    """密码重置令牌表模型：有效期内只能使用一次"""
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='令牌ID')
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True, comment='用户ID')
    token_hash = Column(String(64), nullable=False, comment='令牌摘要')
    expires_at = Column(DateTime, nullable=False, comment='过期时间')
    used = Column(Boolean, default=False, nullable=False, comment='是否已使用')
    created_at = Column(DateTime, default=utcnow, nullable=False, comment='创建时间')

    def __repr__(self):
        return f"<PasswordResetToken id={self.id} user_id={self.user_id} used={self.used}>"


class RefreshToken(Base):
    """刷新令牌表模型：用于换取新的访问令牌，登出时吊销"""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True, comment='令牌ID')
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True, comment='用户ID')
    token_hash = Column(String(64), unique=True, nullable=False, index=True, comment='令牌摘要')
    expires_at = Column(DateTime, nullable=True, comment='过期时间，为空表示不过期')
    revoked = Column(Boolean, default=False, nullable=False, comment='是否已吊销')
    created_at = Column(DateTime, default=utcnow, nullable=False, comment='创建时间')

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.revoked}>"
