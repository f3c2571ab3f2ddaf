"""
关系边数据访问对象
"""

from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import select, delete, and_, or_, func, union
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.models.follow import UserFollow


class FollowDAO:
    """关系边 DAO"""

    @staticmethod
    async def get(
        session: AsyncSession,
        follower: str,
        following: str
    ) -> Optional[UserFollow]:
        """获取有序对 (follower, following) 的关系边"""
        return await session.get(UserFollow, (follower, following))

    @staticmethod
    async def get_pair(
        session: AsyncSession,
        a: str,
        b: str
    ) -> Tuple[Optional[UserFollow], Optional[UserFollow]]:
        """
        读取两个方向的关系边

        Returns:
            (a→b, b→a) 元组，不存在的方向为 None
        """
        result = await session.execute(
            select(UserFollow).where(
                or_(
                    and_(UserFollow.follower == a, UserFollow.following == b),
                    and_(UserFollow.follower == b, UserFollow.following == a),
                )
            )
        )
        forward = backward = None
        for edge in result.scalars().all():
            if edge.follower == a:
                forward = edge
            else:
                backward = edge
        return forward, backward

    @staticmethod
    async def create(
        session: AsyncSession,
        follower: str,
        following: str,
        status: str = "none"
    ) -> UserFollow:
        """
        创建关系边

        Args:
            session: 数据库会话
            follower: 发起方用户名
            following: 目标用户名
            status: 关系状态

        Returns:
            UserFollow: 新创建的关系边
        """
        edge = UserFollow(
            follower=follower,
            following=following,
            status=status,
            accepted_at=datetime.utcnow() if status == "accepted" else None,
        )

        session.add(edge)
        await session.flush()

        return edge

    @staticmethod
    async def accept(session: AsyncSession, edge: UserFollow) -> UserFollow:
        """将关系边置为 accepted"""
        edge.status = "accepted"
        edge.accepted_at = datetime.utcnow()
        await session.flush()
        return edge

    @staticmethod
    async def delete(
        session: AsyncSession,
        follower: str,
        following: str
    ) -> bool:
        """
        删除关系边（任意状态）

        Returns:
            是否删除了一行
        """
        result = await session.execute(
            delete(UserFollow).where(
                and_(
                    UserFollow.follower == follower,
                    UserFollow.following == following
                )
            )
        )
        return result.rowcount > 0

    @staticmethod
    async def delete_pair(session: AsyncSession, a: str, b: str) -> int:
        """删除两个方向的关系边，返回删除行数"""
        result = await session.execute(
            delete(UserFollow).where(
                or_(
                    and_(UserFollow.follower == a, UserFollow.following == b),
                    and_(UserFollow.follower == b, UserFollow.following == a),
                )
            )
        )
        return result.rowcount

    @staticmethod
    async def count_followers(session: AsyncSession, username: str) -> int:
        """统计粉丝数（指向该用户的 none 边）"""
        result = await session.execute(
            select(func.count()).select_from(UserFollow).where(
                and_(
                    UserFollow.following == username,
                    UserFollow.status == "none"
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def count_following(session: AsyncSession, username: str) -> int:
        """统计关注数（该用户发出的 none 边）"""
        result = await session.execute(
            select(func.count()).select_from(UserFollow).where(
                and_(
                    UserFollow.follower == username,
                    UserFollow.status == "none"
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def count_friends(session: AsyncSession, username: str) -> int:
        """
        统计好友数

        任一方向存在 accepted 边的不同对端用户数，
        每段好友关系只计一次
        """
        counterparts = union(
            select(UserFollow.following.label("counterpart")).where(
                and_(UserFollow.follower == username, UserFollow.status == "accepted")
            ),
            select(UserFollow.follower.label("counterpart")).where(
                and_(UserFollow.following == username, UserFollow.status == "accepted")
            ),
        ).subquery()

        result = await session.execute(
            select(func.count()).select_from(counterparts)
        )
        return result.scalar() or 0

    @staticmethod
    async def count_accepted_edges(session: AsyncSession, username: str) -> int:
        """统计涉及该用户的 accepted 边总行数（用于一致性检查）"""
        result = await session.execute(
            select(func.count()).select_from(UserFollow).where(
                and_(
                    or_(UserFollow.follower == username, UserFollow.following == username),
                    UserFollow.status == "accepted"
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def get_following_list(
        session: AsyncSession,
        username: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[UserFollow]:
        """
        获取用户的关注列表（仅 none 边）

        Args:
            session: 数据库会话
            username: 用户名
            limit: 每页数量
            offset: 偏移量

        Returns:
            关系边列表，按创建时间倒序
        """
        result = await session.execute(
            select(UserFollow)
            .where(
                and_(
                    UserFollow.follower == username,
                    UserFollow.status == "none"
                )
            )
            .order_by(UserFollow.created_at.desc(), UserFollow.following)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_follower_list(
        session: AsyncSession,
        username: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[UserFollow]:
        """获取用户的粉丝列表（仅 none 边），按创建时间倒序"""
        result = await session.execute(
            select(UserFollow)
            .where(
                and_(
                    UserFollow.following == username,
                    UserFollow.status == "none"
                )
            )
            .order_by(UserFollow.created_at.desc(), UserFollow.follower)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_friend_edges(
        session: AsyncSession,
        username: str,
        limit: int = 20,
        offset: int = 0
    ) -> List[UserFollow]:
        """
        获取用户的好友关系边

        只取 username 发出的 accepted 边，每段好友关系恰好一行
        """
        result = await session.execute(
            select(UserFollow)
            .where(
                and_(
                    UserFollow.follower == username,
                    UserFollow.status == "accepted"
                )
            )
            .order_by(UserFollow.accepted_at.desc(), UserFollow.following)
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
