"""
评论表 ORM 模型
"""

from sqlalchemy import Column, String, Text, Integer, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from social_backend.db.base import Base


class PostComment(Base):
    """评论表（parent_comment_id 为空是顶级评论，否则为回复）"""
    __tablename__ = "post_comments"

    # 主键
    id = Column(String(64), primary_key=True, comment="评论ID")

    # 外键
    post_id = Column(String(64), ForeignKey("posts.id"), nullable=False, comment="帖子ID")
    parent_comment_id = Column(String(64), ForeignKey("post_comments.id"), nullable=True, comment="父评论ID")

    # 评论内容
    username = Column(String(64), nullable=False, comment="评论用户名")
    text = Column(Text, nullable=False, comment="评论内容")

    # 统计
    heart_count = Column(Integer, nullable=False, default=0, comment="爱心数")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")

    # 索引
    __table_args__ = (
        Index('idx_comments_post', 'post_id', 'created_at'),
        Index('idx_comments_parent', 'parent_comment_id'),
    )
