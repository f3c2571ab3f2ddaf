"""
互动存储

持有帖子的点赞 / 点踩计数与成员集合、评论树以及爱心记录，
为互动引擎和删除服务提供读写原语
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.config.settings import settings
from social_backend.db.dao import PostDAO, CommentDAO, HeartDAO
from social_backend.db.models import Post, PostComment
from social_backend.exceptions import InvalidInput, NotFound
from social_backend.models import EngagementSnapshot, CommentView, ReplyView


def normalize_text(text: Optional[str], max_length: int, field: str = "Comment") -> str:
    """
    校验并去除首尾空白

    Raises:
        InvalidInput: 内容为空或超长
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise InvalidInput(
            f"{field} cannot be empty",
            code="EMPTY_TEXT",
            detail="内容不能为空",
        )
    if len(cleaned) > max_length:
        raise InvalidInput(
            f"{field} must be at most {max_length} characters",
            code="TEXT_TOO_LONG",
            detail=f"内容不能超过{max_length}字符",
        )
    return cleaned


def require_username(username: Optional[str], field: str = "username") -> str:
    """用户名不能为空"""
    if not username or not username.strip():
        raise InvalidInput(
            f"{field} is required",
            code="INVALID_INPUT",
            detail="用户名不能为空",
        )
    return username


def clamp_page(limit: Optional[int], offset: Optional[int]) -> Tuple[int, int]:
    """分页参数：limit 缺省取默认值并限制在 [1, MAX_PAGE_SIZE]，offset 不小于 0"""
    limit = settings.DEFAULT_PAGE_SIZE if limit is None else limit
    return max(1, min(limit, settings.MAX_PAGE_SIZE)), max(0, offset or 0)


class EngagementStore:
    """帖子互动状态的读写"""

    @staticmethod
    async def load_post(session: AsyncSession, post_id: str) -> Post:
        """
        加载帖子

        Raises:
            NotFound: 帖子不存在
        """
        post = await PostDAO.get_by_id(session, post_id) if post_id else None
        if not post:
            raise NotFound("Post not found", code="POST_NOT_FOUND", detail="帖子不存在")
        return post

    @staticmethod
    async def load_comment(session: AsyncSession, post_id: str, comment_id: Optional[str]) -> PostComment:
        """
        加载帖子下的顶级评论

        Raises:
            NotFound: 评论不存在
        """
        comment = None
        if comment_id:
            comment = await CommentDAO.get_top_level(session, post_id, comment_id)
        if not comment:
            raise NotFound("Comment not found", code="COMMENT_NOT_FOUND", detail="评论不存在")
        return comment

    @staticmethod
    async def load_reply(
        session: AsyncSession,
        post_id: str,
        comment_id: Optional[str],
        reply_id: Optional[str]
    ) -> PostComment:
        """
        加载评论下的回复

        评论与回复缺失时分别报错

        Raises:
            NotFound: 评论或回复不存在
        """
        await EngagementStore.load_comment(session, post_id, comment_id)

        reply = None
        if reply_id:
            reply = await CommentDAO.get_reply(session, post_id, comment_id, reply_id)
        if not reply:
            raise NotFound("Reply not found", code="REPLY_NOT_FOUND", detail="回复不存在")
        return reply

    @staticmethod
    def write_reactions(post: Post, liked_by: List[str], disliked_by: List[str]) -> None:
        """
        写回点赞 / 点踩成员集合与计数

        计数始终等于集合大小；列表整体替换以触发 JSON 列的变更检测
        """
        post.liked_by = sorted(set(liked_by))
        post.disliked_by = sorted(set(disliked_by))
        post.likes = len(post.liked_by)
        post.dislikes = len(post.disliked_by)

    @staticmethod
    async def add_comment(
        session: AsyncSession,
        post: Post,
        username: str,
        text: str,
        parent_comment_id: Optional[str] = None,
        comment_id: Optional[str] = None
    ) -> PostComment:
        """追加评论或回复，并同步帖子评论数"""
        comment = await CommentDAO.create(
            session, post.id, username, text,
            parent_comment_id=parent_comment_id,
            comment_id=comment_id,
        )
        post.comments_count = (post.comments_count or 0) + 1
        await session.flush()
        return comment

    @staticmethod
    async def toggle_heart(session: AsyncSession, comment_id: str, username: str) -> Tuple[bool, int]:
        """
        切换用户对评论 / 回复的爱心

        Returns:
            (切换后是否已点爱心, 切换后的爱心数)
        """
        if await HeartDAO.exists(session, comment_id, username):
            await HeartDAO.delete(session, comment_id, username)
            count = await CommentDAO.adjust_heart_count(session, comment_id, -1)
            return False, count

        await HeartDAO.create(session, comment_id, username)
        count = await CommentDAO.adjust_heart_count(session, comment_id, 1)
        return True, count

    @staticmethod
    async def snapshot(session: AsyncSession, post: Post) -> EngagementSnapshot:
        """
        构建帖子的完整互动快照

        评论与回复按创建时间正序，回复挂在父评论下
        """
        comments = await CommentDAO.get_post_comments(session, post.id)
        hearted_by = await HeartDAO.get_hearted_by(session, [c.id for c in comments])

        top_level = {}
        replies = []
        for comment in comments:
            if comment.parent_comment_id is None:
                top_level[comment.id] = CommentView(
                    comment_id=comment.id,
                    username=comment.username,
                    text=comment.text,
                    timestamp=comment.created_at,
                    heart_count=comment.heart_count,
                    hearted_by=hearted_by.get(comment.id, []),
                )
            else:
                replies.append(comment)

        for reply in replies:
            parent = top_level.get(reply.parent_comment_id)
            if parent is None:
                continue
            parent.replies.append(ReplyView(
                comment_id=reply.id,
                username=reply.username,
                text=reply.text,
                timestamp=reply.created_at,
                heart_count=reply.heart_count,
                hearted_by=hearted_by.get(reply.id, []),
            ))

        return EngagementSnapshot(
            post_id=post.id,
            username=post.username,
            message=post.message,
            timestamp=post.created_at,
            likes=post.likes,
            dislikes=post.dislikes,
            liked_by=list(post.liked_by or []),
            disliked_by=list(post.disliked_by or []),
            comments_count=post.comments_count,
            comments=list(top_level.values()),
        )


# 全局互动存储实例
engagement_store = EngagementStore()
