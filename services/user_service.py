"""用户服务模块

用户注册、登录认证、资料维护和角色管理
"""
import logging
import re
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session, sessionmaker

from models import User, UserRole, session_scope
from utils.auth import get_password_hash, verify_password
from utils.exceptions import ResourceConflictException, ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
NAME_MAX_LENGTH = 100


def validate_password(password: Any) -> str:
    """密码策略：至少8位，包含小写字母、大写字母和数字"""
    if not isinstance(password, str) or len(password) < 8:
        raise ValidationException("密码长度至少8位")
    if not re.search(r"[a-z]", password):
        raise ValidationException("密码必须包含小写字母")
    if not re.search(r"[A-Z]", password):
        raise ValidationException("密码必须包含大写字母")
    if not re.search(r"\d", password):
        raise ValidationException("密码必须包含数字")
    return password


def normalize_email(email: Any) -> str:
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
        raise ValidationException("邮箱格式不正确")
    return email.strip().lower()


def _validate_person_name(value: Any, label: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationException(f"{label}必须是字符串")
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationException(f"{label}不能超过{NAME_MAX_LENGTH}个字符")
    return value.strip()


def _validate_roles(roles: Sequence[str]) -> List[str]:
    allowed = [role.value for role in UserRole]
    invalid = [role for role in roles if role not in allowed]
    if invalid:
        raise ValidationException(
            f"无效的角色，可选值: {', '.join(allowed)}",
            data={"value": invalid, "allowed": allowed},
        )
    return list(roles)


class UserService:
    """用户服务类"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _get(self, db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.user_id == user_id).first()
        if not user:
            raise ResourceNotFoundException(message=f"用户 {user_id} 不存在")
        return user

    def register(self, email: Any, password: Any, first_name: Optional[str] = None,
                 last_name: Optional[str] = None, roles: Optional[Sequence[str]] = None) -> User:
        """注册新用户，默认角色为 member"""
        email = normalize_email(email)
        validate_password(password)
        first_name = _validate_person_name(first_name, "名")
        last_name = _validate_person_name(last_name, "姓")
        roles = _validate_roles(roles or [UserRole.MEMBER.value])

        with session_scope(self.session_factory) as db:
            if db.query(User).filter(User.email == email).first():
                raise ResourceConflictException(f"邮箱 {email} 已被注册")

            user = User(
                email=email,
                password=get_password_hash(password),
                first_name=first_name,
                last_name=last_name,
                is_active=True,
            )
            user.set_roles(roles)
            db.add(user)
            db.flush()
            db.refresh(user)

            logger.info(f"用户已注册: id={user.user_id} email={email}")
            return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """认证用户，失败返回 None"""
        if not isinstance(email, str) or not isinstance(password, str):
            return None
        with session_scope(self.session_factory) as db:
            user = db.query(User).filter(User.email == email.strip().lower()).first()
            if not user or not verify_password(password, user.password):
                logger.warning(f"登录失败: email={email}")
                return None
            return user

    def get_user(self, user_id: int) -> Optional[User]:
        with session_scope(self.session_factory) as db:
            return db.query(User).filter(User.user_id == user_id).first()

    def find_by_id(self, user_id: int) -> User:
        with session_scope(self.session_factory) as db:
            return self._get(db, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        with session_scope(self.session_factory) as db:
            return db.query(User).filter(User.email == (email or "").strip().lower()).first()

    def update_profile(self, user_id: int, first_name: Any = None, last_name: Any = None) -> User:
        """更新用户资料，None 表示不修改"""
        first_name = _validate_person_name(first_name, "名")
        last_name = _validate_person_name(last_name, "姓")

        with session_scope(self.session_factory) as db:
            user = self._get(db, user_id)
            if first_name is not None:
                user.first_name = first_name
            if last_name is not None:
                user.last_name = last_name
            db.flush()
            db.refresh(user)
            return user

    def get_user_roles(self, user_id: int) -> List[str]:
        return self.find_by_id(user_id).get_roles()

    def set_user_roles(self, user_id: int, roles: Sequence[str]) -> User:
        roles = _validate_roles(roles)
        with session_scope(self.session_factory) as db:
            user = self._get(db, user_id)
            user.set_roles(roles)
            db.flush()
            db.refresh(user)

            logger.info(f"用户角色已更新: id={user_id} roles={user.get_roles()}")
            return user

    def _set_active(self, user_id: int, active: bool) -> User:
        with session_scope(self.session_factory) as db:
            user = self._get(db, user_id)
            user.is_active = active
            db.flush()
            db.refresh(user)

            logger.info(f"用户状态已更新: id={user_id} active={active}")
            return user

    def activate_user(self, user_id: int) -> User:
        return self._set_active(user_id, True)

    def deactivate_user(self, user_id: int) -> User:
        return self._set_active(user_id, False)

    def verify_password(self, user_id: int, password: Any) -> bool:
        """校验用户当前密码，用于敏感操作前的二次确认"""
        if not isinstance(password, str) or not password:
            return False
        with session_scope(self.session_factory) as db:
            user = self._get(db, user_id)
            return verify_password(password, user.password)

    def change_password(self, user_id: int, old_password: str, new_password: str) -> User:
        """修改密码，需要校验旧密码"""
        validate_password(new_password)
        with session_scope(self.session_factory) as db:
            user = self._get(db, user_id)
            if not verify_password(old_password, user.password):
                raise ValidationException("原密码不正确")
            user.password = get_password_hash(new_password)
            db.flush()
            db.refresh(user)

            logger.info(f"用户已修改密码: id={user_id}")
            return user
