"""
数据库 ORM 模型

导出所有 SQLAlchemy 模型类
"""

from social_backend.db.base import Base

# 导入所有模型（确保 Base 知道所有表）
from .follow import UserFollow
from .post import Post
from .comment import PostComment
from .heart import CommentHeart

__all__ = [
    # Base
    "Base",

    # Models
    "UserFollow",
    "Post",
    "PostComment",
    "CommentHeart",
]
