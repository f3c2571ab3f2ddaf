"""
评论数据访问对象
"""

from typing import Optional, List, Iterable
from sqlalchemy import select, delete, update, and_, case
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.models.comment import PostComment
from social_backend.utils.id_generator import generate_comment_id


class CommentDAO:
    """评论 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        post_id: str,
        username: str,
        text: str,
        parent_comment_id: Optional[str] = None,
        comment_id: Optional[str] = None
    ) -> PostComment:
        """
        创建评论或回复

        Args:
            session: 数据库会话
            post_id: 帖子ID
            username: 用户名
            text: 评论内容
            parent_comment_id: 父评论ID（回复）
            comment_id: 指定评论ID（可选）

        Returns:
            PostComment: 新创建的评论对象
        """
        comment = PostComment(
            id=comment_id or generate_comment_id(),
            post_id=post_id,
            parent_comment_id=parent_comment_id,
            username=username,
            text=text,
            heart_count=0,
        )

        session.add(comment)
        await session.flush()

        return comment

    @staticmethod
    async def get_by_id(session: AsyncSession, comment_id: str) -> Optional[PostComment]:
        """根据ID获取评论（不限帖子与层级）"""
        result = await session.execute(
            select(PostComment).where(PostComment.id == comment_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_top_level(
        session: AsyncSession,
        post_id: str,
        comment_id: str
    ) -> Optional[PostComment]:
        """获取帖子下的顶级评论"""
        result = await session.execute(
            select(PostComment).where(
                and_(
                    PostComment.id == comment_id,
                    PostComment.post_id == post_id,
                    PostComment.parent_comment_id.is_(None)
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_reply(
        session: AsyncSession,
        post_id: str,
        comment_id: str,
        reply_id: str
    ) -> Optional[PostComment]:
        """获取某条评论下的回复"""
        result = await session.execute(
            select(PostComment).where(
                and_(
                    PostComment.id == reply_id,
                    PostComment.post_id == post_id,
                    PostComment.parent_comment_id == comment_id
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_post_comments(session: AsyncSession, post_id: str) -> List[PostComment]:
        """获取帖子下全部评论与回复，按创建时间正序"""
        result = await session.execute(
            select(PostComment)
            .where(PostComment.post_id == post_id)
            .order_by(PostComment.created_at.asc(), PostComment.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_reply_ids(session: AsyncSession, post_id: str, comment_id: str) -> List[str]:
        """获取评论下所有回复的ID"""
        result = await session.execute(
            select(PostComment.id).where(
                and_(
                    PostComment.post_id == post_id,
                    PostComment.parent_comment_id == comment_id
                )
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_post_comment_ids(session: AsyncSession, post_id: str) -> List[str]:
        """获取帖子下所有评论与回复的ID"""
        result = await session.execute(
            select(PostComment.id).where(PostComment.post_id == post_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete_many(session: AsyncSession, comment_ids: Iterable[str]) -> int:
        """
        批量删除评论行

        先删回复再删顶级评论，保证父评论外键始终有效

        Returns:
            删除行数
        """
        ids = list(comment_ids)
        if not ids:
            return 0

        replies = await session.execute(
            delete(PostComment).where(
                and_(
                    PostComment.id.in_(ids),
                    PostComment.parent_comment_id.is_not(None)
                )
            ).execution_options(synchronize_session="fetch")
        )
        parents = await session.execute(
            delete(PostComment).where(PostComment.id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        return replies.rowcount + parents.rowcount

    @staticmethod
    async def adjust_heart_count(session: AsyncSession, comment_id: str, delta: int) -> int:
        """
        原子地调整爱心数

        Returns:
            调整后的爱心数
        """
        new_count = PostComment.heart_count + delta
        await session.execute(
            update(PostComment)
            .where(PostComment.id == comment_id)
            .values(heart_count=case((new_count < 0, 0), else_=new_count))
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(
            select(PostComment.heart_count).where(PostComment.id == comment_id)
        )
        return result.scalar() or 0
