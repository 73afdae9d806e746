"""TaskHive 响应状态码

响应体 code 字段的取值。框架层错误沿用HTTP状态码字符串，
业务层错误使用 100xx 段，每个业务码对应固定的HTTP状态。
"""

# 成功
SUCCESS = "200"
CREATED = "201"

# 框架层：缺少凭据、路由不存在等
UNAUTHORIZED = "401"
FORBIDDEN = "403"
NOT_FOUND = "404"
METHOD_NOT_ALLOWED = "405"
CONFLICT = "409"              # 邮箱已注册、数据被并发修改
TOO_MANY_REQUESTS = "429"     # 密码重置请求过于频繁
INTERNAL_ERROR = "500"

# 业务层
VALIDATION_ERROR = "10001"    # 字段校验失败、非法的任务状态流转
AUTH_ERROR = "10003"          # 登录失败、刷新令牌无效
PERMISSION_ERROR = "10004"    # 修改不属于自己的项目或任务
RESOURCE_ERROR = "10005"      # 项目、任务或用户不存在
TOKEN_ERROR = "10006"         # 密码重置令牌无效、过期或已使用
TRANSACTION_ERROR = "10007"   # 多步写操作失败，事务已回滚

STATUS_MESSAGE = {
    SUCCESS: "操作成功",
    CREATED: "创建成功",
    UNAUTHORIZED: "未登录或登录已过期",
    FORBIDDEN: "禁止访问",
    NOT_FOUND: "接口不存在",
    METHOD_NOT_ALLOWED: "方法不允许",
    CONFLICT: "资源冲突",
    TOO_MANY_REQUESTS: "请求过于频繁",
    INTERNAL_ERROR: "服务器内部错误",
    VALIDATION_ERROR: "数据验证错误",
    AUTH_ERROR: "认证失败",
    PERMISSION_ERROR: "无权限操作此项目或任务",
    RESOURCE_ERROR: "项目、任务或用户不存在",
    TOKEN_ERROR: "重置令牌无效",
    TRANSACTION_ERROR: "事务执行失败，已回滚",
}

# 状态码对应的HTTP状态
CODE_HTTP_STATUS = {
    VALIDATION_ERROR: 400,
    TOKEN_ERROR: 400,
    AUTH_ERROR: 401,
    PERMISSION_ERROR: 403,
    RESOURCE_ERROR: 404,
    CONFLICT: 409,
    TOO_MANY_REQUESTS: 429,
    TRANSACTION_ERROR: 500,
}

# 框架抛出的HTTP异常到状态码的映射
HTTP_STATUS_CODE_MAP = {
    400: VALIDATION_ERROR,
    401: UNAUTHORIZED,
    403: FORBIDDEN,
    404: NOT_FOUND,
    405: METHOD_NOT_ALLOWED,
    409: CONFLICT,
    429: TOO_MANY_REQUESTS,
    500: INTERNAL_ERROR,
}


def get_message(code: str) -> str:
    """根据状态码获取默认消息"""
    return STATUS_MESSAGE.get(code, "未知状态")


def http_status_for(code: str) -> int:
    """业务状态码对应的HTTP状态，未登记的按请求错误处理"""
    return CODE_HTTP_STATUS.get(code, 400)
