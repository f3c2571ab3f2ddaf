"""
关系边表 ORM 模型
"""

from sqlalchemy import Column, String, TIMESTAMP, Index, CheckConstraint
from datetime import datetime

from social_backend.db.base import Base


class UserFollow(Base):
    """
    关系边表

    每个有序对 (follower, following) 至多一行；
    status: none（单向关注）/ pending（好友请求）/ accepted（好友，双向各一行）
    """
    __tablename__ = "user_follows"

    # 联合主键
    follower = Column(String(64), primary_key=True, comment="发起方用户名")
    following = Column(String(64), primary_key=True, comment="目标用户名")

    # 关系状态
    status = Column(String(20), nullable=False, default="none", comment="关系状态")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
    accepted_at = Column(TIMESTAMP, nullable=True, comment="好友请求通过时间")

    # 约束和索引
    __table_args__ = (
        CheckConstraint('follower != following', name='ck_cannot_follow_self'),
        CheckConstraint("status IN ('none', 'pending', 'accepted')", name='ck_follow_status'),
        Index('idx_follows_following_status', 'following', 'status'),
        Index('idx_follows_follower_status', 'follower', 'status'),
    )
