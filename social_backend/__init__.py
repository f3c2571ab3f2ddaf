"""
社交互动后端

关系图（关注 / 好友）与帖子互动（点赞、评论、回复、爱心、级联删除）
"""

__version__ = "0.1.0"
