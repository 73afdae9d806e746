from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime

# 用户相关模式
class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., description="至少8位，包含大小写字母和数字")
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    user_id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            user_id=user.user_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            roles=user.get_roles(),
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

class LoginResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: UserResponse

class RefreshTokenRequest(BaseModel):
    refresh_token: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str

class RolesUpdateRequest(BaseModel):
    roles: List[str]

class VerifyPasswordRequest(BaseModel):
    password: str

# 密码重置相关模式
class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    tid: int = Field(..., description="重置令牌ID")
    token: str
    new_password: str = Field(..., description="至少8位，包含大小写字母和数字")

class PasswordResetResponse(BaseModel):
    tid: int
    expires_at: datetime
    reset_link: Optional[str] = Field(None, description="仅在开发环境返回")
