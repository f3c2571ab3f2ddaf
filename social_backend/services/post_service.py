"""
帖子服务

发帖、查看、编辑以及连同评论树一起删除帖子
"""

from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.config.settings import settings
from social_backend.db.dao import PostDAO, CommentDAO, HeartDAO
from social_backend.db.session import atomic
from social_backend.exceptions import Conflict, Forbidden
from social_backend.models import EngagementSnapshot, PostDeletionResult, PostList
from social_backend.services.engagement_store import (
    EngagementStore, clamp_page, normalize_text, require_username
)


class PostService:
    """帖子服务"""

    @staticmethod
    async def create_post(
        session: AsyncSession,
        username: str,
        message: str,
        post_id: Optional[str] = None
    ) -> EngagementSnapshot:
        """
        发帖

        Args:
            session: 数据库会话
            username: 作者用户名
            message: 帖子内容
            post_id: 指定帖子ID（可选）

        Returns:
            新帖子的互动快照（计数为零）
        """
        require_username(username)
        message = normalize_text(message, settings.POST_MAX_LENGTH, "Message")

        async with atomic(session):
            if post_id and await PostDAO.get_by_id(session, post_id):
                raise Conflict("Post id already exists", code="DUPLICATE_POST_ID", detail="帖子ID已存在")
            post = await PostDAO.create(session, username, message, post_id=post_id)

        logger.info(f"{username} created post {post.id}")
        return await EngagementStore.snapshot(session, post)

    @staticmethod
    async def get_post(session: AsyncSession, post_id: str) -> EngagementSnapshot:
        """获取帖子的完整互动快照"""
        post = await EngagementStore.load_post(session, post_id)
        return await EngagementStore.snapshot(session, post)

    @staticmethod
    async def list_user_posts(
        session: AsyncSession,
        username: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> PostList:
        """
        用户发布的帖子（含完整互动快照），按发布时间倒序

        Args:
            session: 数据库会话
            username: 作者用户名
            limit: 每页数量
            offset: 偏移量

        Returns:
            帖子列表及总数
        """
        require_username(username)
        limit, offset = clamp_page(limit, offset)

        posts = await PostDAO.get_user_posts(session, username, limit, offset)
        total = await PostDAO.count_user_posts(session, username)
        snapshots = [await EngagementStore.snapshot(session, post) for post in posts]

        return PostList(
            posts=snapshots,
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(posts) < total,
        )

    @staticmethod
    async def update_post(
        session: AsyncSession,
        post_id: str,
        username: str,
        message: str
    ) -> EngagementSnapshot:
        """
        编辑帖子内容（仅作者）

        Raises:
            NotFound: 帖子不存在
            Forbidden: 非作者
        """
        require_username(username)
        message = normalize_text(message, settings.POST_MAX_LENGTH, "Message")

        async with atomic(session):
            post = await EngagementStore.load_post(session, post_id)
            if post.username != username:
                raise Forbidden(
                    "You can only edit your own posts",
                    code="PERMISSION_DENIED",
                    detail="只能编辑自己的帖子",
                )
            post.message = message

        return await EngagementStore.snapshot(session, post)

    @staticmethod
    async def delete_post(session: AsyncSession, post_id: str, username: str) -> PostDeletionResult:
        """
        删除帖子（仅作者）

        帖子、其下全部评论与回复及爱心记录在同一事务单元内删除

        Raises:
            NotFound: 帖子不存在
            Forbidden: 非作者
        """
        require_username(username)

        async with atomic(session):
            post = await EngagementStore.load_post(session, post_id)
            if post.username != username:
                raise Forbidden(
                    "You can only delete your own posts",
                    code="PERMISSION_DENIED",
                    detail="只能删除自己的帖子",
                )

            comment_ids = await CommentDAO.get_post_comment_ids(session, post.id)
            await HeartDAO.delete_for_comments(session, comment_ids)
            removed = await CommentDAO.delete_many(session, comment_ids)
            await PostDAO.delete(session, post)

        logger.info(f"{username} deleted post {post_id} ({removed} comments)")
        return PostDeletionResult(post_id=post_id, deleted_comments_count=removed)


# 全局帖子服务实例
post_service = PostService()
