"""
帖子数据访问对象
"""

from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.models.post import Post
from social_backend.utils.id_generator import generate_post_id


class PostDAO:
    """帖子 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        username: str,
        message: str,
        post_id: Optional[str] = None
    ) -> Post:
        """
        创建帖子

        Args:
            session: 数据库会话
            username: 作者用户名
            message: 帖子内容
            post_id: 指定帖子ID（可选）

        Returns:
            Post: 新创建的帖子对象
        """
        post = Post(
            id=post_id or generate_post_id(),
            username=username,
            message=message,
            likes=0,
            dislikes=0,
            liked_by=[],
            disliked_by=[],
            comments_count=0,
        )

        session.add(post)
        await session.flush()

        return post

    @staticmethod
    async def get_by_id(session: AsyncSession, post_id: str) -> Optional[Post]:
        """根据ID获取帖子"""
        result = await session.execute(
            select(Post).where(Post.id == post_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_posts(
        session: AsyncSession,
        username: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[Post]:
        """获取用户发布的帖子，按时间倒序"""
        result = await session.execute(
            select(Post)
            .where(Post.username == username)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_user_posts(session: AsyncSession, username: str) -> int:
        """统计用户发布的帖子数"""
        result = await session.execute(
            select(func.count()).select_from(Post).where(Post.username == username)
        )
        return result.scalar() or 0

    @staticmethod
    async def delete(session: AsyncSession, post: Post) -> None:
        """删除帖子行（调用方负责先删除评论与爱心记录）"""
        await session.delete(post)
        await session.flush()
