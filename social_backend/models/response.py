"""
统一响应模型
"""

from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict, Field


T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """统一API响应格式"""
    success: bool = Field(True, description="请求是否成功")
    data: Optional[T] = Field(None, description="响应数据")
    message: Optional[str] = Field(None, description="响应消息")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {"key": "value"},
                "message": "操作成功"
            }
        }
    )


class ErrorResponse(BaseModel):
    """错误响应"""
    success: bool = Field(False, description="请求失败")
    code: str = Field(..., description="业务错误码")
    message: str = Field(..., description="错误信息")
    error: Optional[dict] = Field(None, description="错误详情")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "code": "ALREADY_FOLLOWING",
                "message": "Already following",
                "error": {
                    "type": "ALREADY_FOLLOWING",
                    "message": "已经关注了"
                }
            }
        }
    )
