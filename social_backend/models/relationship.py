"""
关系图相关数据模型
"""

from typing import List
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class EdgeStatus(str, Enum):
    """关系边状态"""
    NONE = "none"            # 单向关注
    PENDING = "pending"      # 好友请求待处理
    ACCEPTED = "accepted"    # 好友（双向各一行）


class FriendshipStatus(str, Enum):
    """两个用户之间的好友状态（从 a 的视角）"""
    NONE = "none"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    FRIENDS = "friends"


class FriendRequestOutcome(str, Enum):
    """好友请求结果"""
    REQUESTED = "requested"
    ACCEPTED = "accepted"


class EdgeView(BaseModel):
    """关系边"""
    follower: str
    following: str
    status: EdgeStatus
    created_at: datetime

    class Config:
        from_attributes = True


class RelationshipStatusView(BaseModel):
    """两个用户之间的关系视图"""
    is_following: bool = Field(False, description="a 是否单向关注 b")
    friendship_status: FriendshipStatus = Field(FriendshipStatus.NONE, description="好友状态")


class RelationshipCounts(BaseModel):
    """关注 / 粉丝 / 好友数量（可由关系边重新计算）"""
    username: str
    followers_count: int = 0
    following_count: int = 0
    friends_count: int = 0


class RelatedUser(BaseModel):
    """关系列表中的用户"""
    username: str
    since: datetime


class RelatedUserList(BaseModel):
    """关系列表"""
    users: List[RelatedUser] = Field(default_factory=list)
    total: int = Field(0, description="符合条件的总数（不受分页影响）")
    limit: int
    offset: int
