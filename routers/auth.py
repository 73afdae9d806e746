from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request, status

from schemas import (
    BaseResponse, ChangePasswordRequest, ForgotPasswordRequest, LoginRequest, LoginResponse,
    PasswordResetResponse, ProfileUpdateRequest, RefreshTokenRequest, RegisterRequest,
    ResetPasswordRequest, TokenResponse, UserResponse, VerifyPasswordRequest
)
from services.container import Services, get_services
from utils.auth import create_access_token, get_current_principal
from utils.exceptions import AuthenticationException
from utils.permissions import Principal

router = APIRouter()

@router.post("/register", response_model=BaseResponse, status_code=status.HTTP_201_CREATED)
def register(register_data: RegisterRequest, services: Services = Depends(get_services)):
    """用户注册"""
    user = services.users.register(
        email=register_data.email,
        password=register_data.password,
        first_name=register_data.first_name,
        last_name=register_data.last_name,
    )
    return BaseResponse(code="201", message="注册成功", data=UserResponse.from_user(user))

@router.post("/login", response_model=BaseResponse)
def login(login_data: LoginRequest, services: Services = Depends(get_services)):
    """用户登录，同时签发刷新令牌"""
    user = services.users.authenticate(login_data.email, login_data.password)
    if not user:
        raise AuthenticationException("邮箱或密码错误")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="用户已被禁用")

    access_token = create_access_token(user.user_id, user.get_roles())
    refresh_token = services.auth_tokens.issue_refresh_token(user.user_id)
    return BaseResponse(
        message="登录成功",
        data=LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserResponse.from_user(user),
        )
    )

@router.post("/refresh", response_model=BaseResponse)
def refresh(refresh_data: RefreshTokenRequest, services: Services = Depends(get_services)):
    """使用刷新令牌换取新的访问令牌"""
    access_token = services.auth_tokens.refresh_access_token(refresh_data.refresh_token)
    return BaseResponse(message="令牌刷新成功", data=TokenResponse(access_token=access_token))

@router.post("/logout", response_model=BaseResponse)
def logout(refresh_data: RefreshTokenRequest, services: Services = Depends(get_services)):
    """登出：吊销刷新令牌"""
    revoked = services.auth_tokens.revoke_refresh_token(refresh_data.refresh_token)
    return BaseResponse(message="已登出" if revoked else "刷新令牌无效或已吊销", data={"revoked": revoked})

@router.post("/forgot-password", response_model=BaseResponse)
def forgot_password(
    forgot_data: ForgotPasswordRequest,
    request: Request,
    services: Services = Depends(get_services)
):
    """申请密码重置

    未接入邮件服务，开启 EXPOSE_RESET_LINK 时在响应中返回重置链接。
    """
    app_settings = request.app.state.settings
    reset = services.auth_tokens.request_password_reset(forgot_data.email)

    reset_link = None
    if app_settings.EXPOSE_RESET_LINK:
        query = urlencode({"tid": reset.token_id, "token": reset.token})
        reset_link = f"{app_settings.FRONTEND_URL.rstrip('/')}/auth/reset-password?{query}"
    return BaseResponse(
        message="重置链接已发送",
        data=PasswordResetResponse(tid=reset.token_id, expires_at=reset.expires_at, reset_link=reset_link)
    )

@router.get("/validate-reset", response_model=BaseResponse)
def validate_reset(tid: int, token: str, services: Services = Depends(get_services)):
    """校验密码重置令牌"""
    services.auth_tokens.validate_reset_token(tid, token)
    return BaseResponse(message="重置令牌有效", data={"valid": True})

@router.post("/reset-password", response_model=BaseResponse)
def reset_password(reset_data: ResetPasswordRequest, services: Services = Depends(get_services)):
    """使用重置令牌设置新密码"""
    services.auth_tokens.reset_password(reset_data.tid, reset_data.token, reset_data.new_password)
    return BaseResponse(message="密码重置成功")

@router.get("/me", response_model=BaseResponse)
def get_me(
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """获取当前用户信息"""
    user = services.users.find_by_id(principal.user_id)
    return BaseResponse(message="获取用户信息成功", data=UserResponse.from_user(user))

@router.put("/me", response_model=BaseResponse)
def update_me(
    profile_data: ProfileUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """更新当前用户资料"""
    user = services.users.update_profile(
        principal.user_id,
        first_name=profile_data.first_name,
        last_name=profile_data.last_name,
    )
    return BaseResponse(message="更新成功", data=UserResponse.from_user(user))

@router.put("/me/password", response_model=BaseResponse)
def change_password(
    password_data: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """修改当前用户密码"""
    services.users.change_password(principal.user_id, password_data.old_password, password_data.new_password)
    return BaseResponse(message="密码修改成功")

@router.post("/me/verify-password", response_model=BaseResponse)
def verify_password(
    password_data: VerifyPasswordRequest,
    principal: Principal = Depends(get_current_principal),
    services: Services = Depends(get_services)
):
    """校验当前用户密码"""
    valid = services.users.verify_password(principal.user_id, password_data.password)
    return BaseResponse(message="密码正确" if valid else "密码错误", data={"valid": valid})
