"""认证工具模块

密码哈希、JWT令牌的签发与校验，以及获取当前请求主体的依赖
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from config.settings import settings
from utils.permissions import Principal

# 密码加密
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

security = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """生成密码哈希"""
    return pwd_context.hash(password)


def generate_token() -> str:
    """生成随机令牌（刷新令牌、密码重置令牌）"""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """令牌摘要，数据库中只保存摘要"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_access_token(user_id: int, roles: List[str], expires_delta: Optional[timedelta] = None) -> str:
    """创建访问令牌"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": str(user_id), "roles": list(roles), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_token(token: str) -> dict:
    """验证令牌"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise _unauthorized("无效的认证凭据")
    if payload.get("sub") is None:
        raise _unauthorized("无效的认证凭据")
    return payload


def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Principal:
    """解析令牌并返回当前请求主体

    角色以数据库中的当前值为准，令牌中的角色仅作参考。
    """
    if not credentials:
        raise _unauthorized("缺少认证凭据")

    payload = verify_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("无效的认证凭据")

    user = request.app.state.services.users.get_user(user_id)
    if user is None:
        raise _unauthorized("用户不存在")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="用户已被禁用")

    return Principal(user_id=user.user_id, roles=user.get_roles())


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """要求当前请求主体为管理员"""
    if not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="权限不足")
    return principal
