"""
数据模型模块

导出所有 Pydantic 数据模型，用于服务结果与 API 请求/响应验证
"""

# 通用响应
from .response import ApiResponse, ErrorResponse

# 关系图模块
from .relationship import (
    EdgeStatus, FriendshipStatus, FriendRequestOutcome, EdgeView,
    RelationshipStatusView, RelationshipCounts, RelatedUser, RelatedUserList
)

# 互动模块
from .engagement import (
    EngagementAction, ActionPayload, ActionRequest,
    ReplyView, CommentView, EngagementSnapshot,
    DeletedType, DeletionResult,
    PostCreate, PostUpdate, PostDeletionResult, PostList
)

__all__ = [
    # Response
    "ApiResponse",
    "ErrorResponse",

    # Relationship
    "EdgeStatus",
    "FriendshipStatus",
    "FriendRequestOutcome",
    "EdgeView",
    "RelationshipStatusView",
    "RelationshipCounts",
    "RelatedUser",
    "RelatedUserList",

    # Engagement
    "EngagementAction",
    "ActionPayload",
    "ActionRequest",
    "ReplyView",
    "CommentView",
    "EngagementSnapshot",
    "DeletedType",
    "DeletionResult",
    "PostCreate",
    "PostUpdate",
    "PostDeletionResult",
    "PostList",
]
