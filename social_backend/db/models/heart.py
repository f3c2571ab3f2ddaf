"""
评论爱心记录表 ORM 模型
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Index
from datetime import datetime

from social_backend.db.base import Base


class CommentHeart(Base):
    """爱心记录表，(comment_id, username) 唯一"""
    __tablename__ = "comment_hearts"

    comment_id = Column(String(64), ForeignKey("post_comments.id"), primary_key=True, comment="评论或回复ID")
    username = Column(String(64), primary_key=True, comment="点爱心的用户名")

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")

    __table_args__ = (
        Index('idx_hearts_user', 'username'),
    )
