"""
爱心记录数据访问对象
"""

from typing import Dict, Iterable, List
from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.models.heart import CommentHeart


class HeartDAO:
    """爱心记录 DAO"""

    @staticmethod
    async def exists(session: AsyncSession, comment_id: str, username: str) -> bool:
        """检查用户是否已给评论点爱心"""
        result = await session.execute(
            select(CommentHeart.comment_id).where(
                and_(
                    CommentHeart.comment_id == comment_id,
                    CommentHeart.username == username
                )
            )
        )
        return result.first() is not None

    @staticmethod
    async def create(session: AsyncSession, comment_id: str, username: str) -> CommentHeart:
        """新增爱心记录"""
        heart = CommentHeart(comment_id=comment_id, username=username)
        session.add(heart)
        await session.flush()
        return heart

    @staticmethod
    async def delete(session: AsyncSession, comment_id: str, username: str) -> bool:
        """删除单条爱心记录"""
        result = await session.execute(
            delete(CommentHeart).where(
                and_(
                    CommentHeart.comment_id == comment_id,
                    CommentHeart.username == username
                )
            ).execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    @staticmethod
    async def delete_for_comments(session: AsyncSession, comment_ids: Iterable[str]) -> int:
        """
        删除一组评论 / 回复的全部爱心记录

        Returns:
            删除行数
        """
        ids = list(comment_ids)
        if not ids:
            return 0

        result = await session.execute(
            delete(CommentHeart)
            .where(CommentHeart.comment_id.in_(ids))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    @staticmethod
    async def get_hearted_by(
        session: AsyncSession,
        comment_ids: Iterable[str]
    ) -> Dict[str, List[str]]:
        """
        批量获取评论的点爱心用户

        Returns:
            {comment_id: [username, ...]}，用户名按字母序
        """
        ids = list(comment_ids)
        hearted_by: Dict[str, List[str]] = {comment_id: [] for comment_id in ids}
        if not ids:
            return hearted_by

        result = await session.execute(
            select(CommentHeart.comment_id, CommentHeart.username)
            .where(CommentHeart.comment_id.in_(ids))
            .order_by(CommentHeart.username)
        )
        for comment_id, username in result.all():
            hearted_by[comment_id].append(username)
        return hearted_by

    @staticmethod
    async def count_for_comments(session: AsyncSession, comment_ids: Iterable[str]) -> int:
        """统计一组评论的爱心记录行数"""
        ids = list(comment_ids)
        if not ids:
            return 0
        result = await session.execute(
            select(CommentHeart.comment_id).where(CommentHeart.comment_id.in_(ids))
        )
        return len(result.all())
