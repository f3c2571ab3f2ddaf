"""
数据访问对象（DAO）层

封装数据库操作，提供给服务层使用
"""

from .follow_dao import FollowDAO
from .post_dao import PostDAO
from .comment_dao import CommentDAO
from .heart_dao import HeartDAO

__all__ = [
    "FollowDAO",
    "PostDAO",
    "CommentDAO",
    "HeartDAO",
]
