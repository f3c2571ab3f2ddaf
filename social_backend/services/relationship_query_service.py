"""
关系查询服务

从关系边推导关注 / 粉丝 / 好友数量与关系列表；
数量投影可缓存在 Redis 中，但始终可由关系边重新计算
"""

import json
from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.config.settings import settings
from social_backend.db.dao import FollowDAO
from social_backend.models import RelationshipCounts, RelatedUser, RelatedUserList
from social_backend.services.engagement_store import clamp_page, require_username
from social_backend.utils.redis_client import RedisClient, redis_client

COUNTS_KEY = "relationship:counts:{username}"


class RelationshipQueryService:
    """关系查询服务"""

    def __init__(self, cache: Optional[RedisClient] = None):
        self.cache = cache if cache is not None else redis_client

    async def counts(
        self,
        session: AsyncSession,
        username: str,
        use_cache: bool = True
    ) -> RelationshipCounts:
        """
        获取用户的关注 / 粉丝 / 好友数量

        Args:
            session: 数据库会话
            username: 用户名
            use_cache: 是否读取缓存投影

        Returns:
            数量快照
        """
        require_username(username)

        if use_cache:
            cached = await self._read_cache(username)
            if cached is not None:
                return cached

        counts = await self.recompute(session, username)
        await self._write_cache(counts)
        return counts

    async def recompute(self, session: AsyncSession, username: str) -> RelationshipCounts:
        """仅从关系边重新计算数量"""
        friends_count = await FollowDAO.count_friends(session, username)

        # 每段好友关系应恰好两行 accepted 边
        accepted_rows = await FollowDAO.count_accepted_edges(session, username)
        if accepted_rows != friends_count * 2:
            logger.warning(
                f"⚠️  Asymmetric accepted edges for {username}: "
                f"{accepted_rows} rows for {friends_count} friends"
            )

        return RelationshipCounts(
            username=username,
            followers_count=await FollowDAO.count_followers(session, username),
            following_count=await FollowDAO.count_following(session, username),
            friends_count=friends_count,
        )

    async def invalidate(self, *usernames: str) -> None:
        """关系边变更后清除相关用户的缓存投影"""
        if not self.cache.connected or not usernames:
            return
        try:
            await self.cache.delete(*[COUNTS_KEY.format(username=u) for u in usernames])
        except Exception as e:
            logger.warning(f"⚠️  Failed to invalidate relationship counts: {e}")

    async def list_followers(
        self,
        session: AsyncSession,
        username: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> RelatedUserList:
        """粉丝列表（单向关注该用户的人）"""
        require_username(username)
        limit, offset = clamp_page(limit, offset)
        edges = await FollowDAO.get_follower_list(session, username, limit, offset)
        users = [RelatedUser(username=e.follower, since=e.created_at) for e in edges]
        total = await FollowDAO.count_followers(session, username)
        return RelatedUserList(users=users, total=total, limit=limit, offset=offset)

    async def list_following(
        self,
        session: AsyncSession,
        username: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> RelatedUserList:
        """关注列表（该用户单向关注的人）"""
        require_username(username)
        limit, offset = clamp_page(limit, offset)
        edges = await FollowDAO.get_following_list(session, username, limit, offset)
        users = [RelatedUser(username=e.following, since=e.created_at) for e in edges]
        total = await FollowDAO.count_following(session, username)
        return RelatedUserList(users=users, total=total, limit=limit, offset=offset)

    async def list_friends(
        self,
        session: AsyncSession,
        username: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> RelatedUserList:
        """好友列表"""
        require_username(username)
        limit, offset = clamp_page(limit, offset)
        edges = await FollowDAO.get_friend_edges(session, username, limit, offset)
        users = [
            RelatedUser(username=e.following, since=e.accepted_at or e.created_at)
            for e in edges
        ]
        total = await FollowDAO.count_friends(session, username)
        return RelatedUserList(users=users, total=total, limit=limit, offset=offset)

    async def _read_cache(self, username: str) -> Optional[RelationshipCounts]:
        if not self.cache.connected:
            return None
        try:
            raw = await self.cache.get(COUNTS_KEY.format(username=username))
        except Exception as e:
            logger.warning(f"⚠️  Relationship counts cache read failed: {e}")
            return None
        if not raw:
            return None
        return RelationshipCounts(**json.loads(raw))

    async def _write_cache(self, counts: RelationshipCounts) -> None:
        if not self.cache.connected:
            return
        try:
            await self.cache.set(
                COUNTS_KEY.format(username=counts.username),
                counts.model_dump_json(),
                ex=settings.RELATIONSHIP_CACHE_TTL,
            )
        except Exception as e:
            logger.warning(f"⚠️  Relationship counts cache write failed: {e}")


# 全局关系查询服务实例
relationship_query_service = RelationshipQueryService()
