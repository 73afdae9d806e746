"""认证令牌服务模块

密码重置令牌的申请、校验与使用，刷新令牌的签发、换取与吊销。
令牌原文只返回给调用方一次，数据库中只保存摘要。
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from models import PasswordResetToken, RefreshToken, User, session_scope
from models.base import utcnow
from utils.auth import create_access_token, generate_token, get_password_hash, hash_token
from utils.exceptions import (
    AuthenticationException, InvalidTokenException, RateLimitException, ResourceNotFoundException
)
from .user_service import normalize_email, validate_password

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasswordResetRequest:
    """密码重置申请结果，token 为令牌原文"""
    token_id: int
    user_id: int
    token: str
    expires_at: datetime


class AuthTokenService:
    """认证令牌服务类"""

    def __init__(self, session_factory: sessionmaker, reset_expire_minutes: int = 60,
                 reset_cooldown_minutes: int = 10, refresh_expire_days: int = 30):
        self.session_factory = session_factory
        self.reset_expire_minutes = reset_expire_minutes
        self.reset_cooldown_minutes = reset_cooldown_minutes
        self.refresh_expire_days = refresh_expire_days

    # 密码重置

    def request_password_reset(self, email: Any) -> PasswordResetRequest:
        """申请密码重置令牌

        邮箱未注册时抛出 ResourceNotFoundException；
        冷却时间内已有未使用的令牌时抛出 RateLimitException。
        """
        email = normalize_email(email)
        now = utcnow()

        with session_scope(self.session_factory) as db:
            user = db.query(User).filter(User.email == email).first()
            if not user:
                raise ResourceNotFoundException(message="邮箱未注册")

            if self.reset_cooldown_minutes > 0:
                since = now - timedelta(minutes=self.reset_cooldown_minutes)
                recent = (
                    db.query(PasswordResetToken)
                    .filter(
                        PasswordResetToken.user_id == user.user_id,
                        PasswordResetToken.used.is_(False),
                        PasswordResetToken.created_at > since,
                    )
                    .count()
                )
                if recent:
                    raise RateLimitException("重置链接刚刚发送过，请查收邮件后再试")

            token = generate_token()
            record = PasswordResetToken(
                user_id=user.user_id,
                token_hash=hash_token(token),
                expires_at=now + timedelta(minutes=self.reset_expire_minutes),
                used=False,
            )
            db.add(record)
            db.flush()

            logger.info(f"已创建密码重置令牌: id={record.id} user={user.user_id}")
            return PasswordResetRequest(
                token_id=record.id,
                user_id=user.user_id,
                token=token,
                expires_at=record.expires_at,
            )

    def _usable_reset_token(self, db: Session, token_id: Any, token: Any) -> PasswordResetToken:
        record = db.query(PasswordResetToken).filter(PasswordResetToken.id == token_id).first()
        if not record or not isinstance(token, str) or not token:
            raise InvalidTokenException("重置令牌无效")
        if record.used:
            raise InvalidTokenException("重置令牌已使用")
        if record.expires_at < utcnow():
            raise InvalidTokenException("重置令牌已过期")
        if not secrets.compare_digest(record.token_hash, hash_token(token)):
            raise InvalidTokenException("重置令牌无效")
        return record

    def validate_reset_token(self, token_id: Any, token: Any) -> int:
        """校验重置令牌，可用时返回对应的用户ID"""
        with session_scope(self.session_factory) as db:
            return self._usable_reset_token(db, token_id, token).user_id

    def reset_password(self, token_id: Any, token: Any, new_password: Any) -> User:
        """使用重置令牌设置新密码

        令牌使用后作废，该用户其他未使用的重置令牌和所有刷新令牌一并作废。
        """
        validate_password(new_password)

        with session_scope(self.session_factory, action="重置密码") as db:
            record = self._usable_reset_token(db, token_id, token)
            user = db.query(User).filter(User.user_id == record.user_id).first()
            if not user:
                raise ResourceNotFoundException(message=f"用户 {record.user_id} 不存在")

            user.password = get_password_hash(new_password)
            record.used = True
            db.query(PasswordResetToken).filter(
                PasswordResetToken.user_id == user.user_id,
                PasswordResetToken.used.is_(False),
            ).update({"used": True}, synchronize_session=False)
            revoked = db.query(RefreshToken).filter(
                RefreshToken.user_id == user.user_id,
                RefreshToken.revoked.is_(False),
            ).update({"revoked": True}, synchronize_session=False)
            db.flush()
            db.refresh(user)

            logger.info(f"密码已重置: user={user.user_id} revoked_refresh_tokens={revoked}")
            return user

    # 刷新令牌

    def issue_refresh_token(self, user_id: int) -> str:
        """为用户签发刷新令牌，返回令牌原文"""
        token = generate_token()
        with session_scope(self.session_factory) as db:
            if not db.query(User).filter(User.user_id == user_id).first():
                raise ResourceNotFoundException(message=f"用户 {user_id} 不存在")
            db.add(RefreshToken(
                user_id=user_id,
                token_hash=hash_token(token),
                expires_at=utcnow() + timedelta(days=self.refresh_expire_days),
                revoked=False,
            ))
        return token

    def refresh_access_token(self, refresh_token: Any) -> str:
        """用刷新令牌换取新的访问令牌"""
        if not isinstance(refresh_token, str) or not refresh_token:
            raise AuthenticationException("刷新令牌无效")

        with session_scope(self.session_factory) as db:
            record = (
                db.query(RefreshToken)
                .filter(RefreshToken.token_hash == hash_token(refresh_token), RefreshToken.revoked.is_(False))
                .first()
            )
            if not record or (record.expires_at is not None and record.expires_at < utcnow()):
                raise AuthenticationException("刷新令牌无效或已过期")

            user = db.query(User).filter(User.user_id == record.user_id).first()
            if not user or not user.is_active:
                raise AuthenticationException("用户不存在或已被禁用")
            return create_access_token(user.user_id, user.get_roles())

    def revoke_refresh_token(self, refresh_token: Any) -> bool:
        """吊销刷新令牌（登出），令牌不存在或已吊销时返回 False"""
        if not isinstance(refresh_token, str) or not refresh_token:
            return False
        with session_scope(self.session_factory) as db:
            record = (
                db.query(RefreshToken)
                .filter(RefreshToken.token_hash == hash_token(refresh_token), RefreshToken.revoked.is_(False))
                .first()
            )
            if not record:
                return False
            record.revoked = True

        logger.info(f"刷新令牌已吊销: id={record.id} user={record.user_id}")
        return True
