"""
帖子表 ORM 模型
"""

from sqlalchemy import Column, String, Text, Integer, JSON, TIMESTAMP, Index
from datetime import datetime

from social_backend.db.base import Base


class Post(Base):
    """帖子表（内嵌点赞 / 点踩计数与成员集合）"""
    __tablename__ = "posts"

    # 主键
    id = Column(String(64), primary_key=True, comment="帖子ID")

    # 作者与内容
    username = Column(String(64), nullable=False, comment="作者用户名")
    message = Column(Text, nullable=False, comment="帖子内容")

    # 互动统计
    likes = Column(Integer, nullable=False, default=0, comment="点赞数")
    dislikes = Column(Integer, nullable=False, default=0, comment="点踩数")
    liked_by = Column(JSON, nullable=False, default=list, comment="点赞用户名列表")
    disliked_by = Column(JSON, nullable=False, default=list, comment="点踩用户名列表")
    comments_count = Column(Integer, nullable=False, default=0, comment="评论数（含回复）")

    # 乐观锁版本号
    version = Column(Integer, nullable=False, comment="版本号")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="发布时间")
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow, comment="更新时间")

    __mapper_args__ = {"version_id_col": version}

    # 索引
    __table_args__ = (
        Index('idx_posts_user', 'username', 'created_at'),
    )
