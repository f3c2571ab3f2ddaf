"""
业务异常定义

服务层抛出，HTTP 层统一转换为 ErrorResponse
"""

from typing import Optional


class SocialError(Exception):
    """业务异常基类"""

    status_code = 500
    default_code = "SOCIAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        # 面向用户的提示信息
        self.detail = detail or message

    def to_error(self) -> dict:
        return {"type": self.code, "message": self.detail}


class InvalidInput(SocialError):
    """参数缺失、为空或自引用（客户端错误，不应重试）"""

    status_code = 400
    default_code = "INVALID_INPUT"


class NotFound(SocialError):
    """引用的帖子 / 评论 / 回复 / 关系不存在"""

    status_code = 404
    default_code = "NOT_FOUND"


class Forbidden(SocialError):
    """无权修改或删除他人资源"""

    status_code = 403
    default_code = "PERMISSION_DENIED"


class Conflict(SocialError):
    """重复关注、重复好友请求或并发写冲突"""

    status_code = 409
    default_code = "CONFLICT"


class StorageFailure(SocialError):
    """持久层错误或事务无法提交"""

    status_code = 500
    default_code = "STORAGE_FAILURE"
