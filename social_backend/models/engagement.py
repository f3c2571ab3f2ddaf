"""
帖子互动相关数据模型
"""

from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class EngagementAction(str, Enum):
    """互动动作"""
    LIKE = "like"
    DISLIKE = "dislike"
    HEART_COMMENT = "heart_comment"
    HEART_REPLY = "heart_reply"
    COMMENT = "comment"
    REPLY = "reply"


class ActionPayload(BaseModel):
    """互动动作的附加参数"""
    comment_id: Optional[str] = Field(None, description="目标评论ID（comment 动作时可作为指定的新评论ID）")
    reply_id: Optional[str] = Field(None, description="目标回复ID")
    text: Optional[str] = Field(None, description="评论 / 回复内容")


class ActionRequest(ActionPayload):
    """互动请求体"""
    action: EngagementAction


class ReplyView(BaseModel):
    """回复"""
    comment_id: str
    username: str
    text: str
    timestamp: datetime
    heart_count: int = 0
    hearted_by: List[str] = Field(default_factory=list)


class CommentView(ReplyView):
    """顶级评论"""
    replies: List[ReplyView] = Field(default_factory=list)


class EngagementSnapshot(BaseModel):
    """帖子的完整互动快照"""
    post_id: str
    username: str
    message: str
    timestamp: datetime
    likes: int = 0
    dislikes: int = 0
    liked_by: List[str] = Field(default_factory=list)
    disliked_by: List[str] = Field(default_factory=list)
    comments_count: int = 0
    comments: List[CommentView] = Field(default_factory=list)

    def find_comment(self, comment_id: str) -> Optional[CommentView]:
        for comment in self.comments:
            if comment.comment_id == comment_id:
                return comment
        return None


class DeletedType(str, Enum):
    """删除对象类型"""
    COMMENT = "comment"
    REPLY = "reply"


class DeletionResult(BaseModel):
    """级联删除结果"""
    deleted_id: str
    deleted_type: DeletedType
    deleted_replies_count: int = 0


class PostCreate(BaseModel):
    """发帖请求"""
    message: str = Field(..., description="帖子内容")
    post_id: Optional[str] = Field(None, description="指定帖子ID（可选）")


class PostUpdate(BaseModel):
    """编辑帖子请求"""
    message: str = Field(..., description="帖子内容")


class PostDeletionResult(BaseModel):
    """删除帖子结果"""
    post_id: str
    deleted_comments_count: int = 0


class PostList(BaseModel):
    """用户帖子列表（按发布时间倒序）"""
    posts: List[EngagementSnapshot] = Field(default_factory=list)
    total: int = 0
    limit: int
    offset: int
    has_more: bool = False
