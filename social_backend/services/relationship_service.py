"""
关系图服务

处理关注、好友请求 / 通过、解除好友以及两人之间的关系状态
"""

from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.dao import FollowDAO
from social_backend.db.session import atomic
from social_backend.exceptions import Conflict, InvalidInput
from social_backend.models import (
    EdgeStatus, EdgeView, FriendRequestOutcome, FriendshipStatus, RelationshipStatusView
)
from social_backend.services.engagement_store import require_username
from social_backend.services.relationship_query_service import (
    RelationshipQueryService, relationship_query_service
)


def _validate_pair(a: str, b: str) -> None:
    """两个用户名都不能为空，且不能相同"""
    require_username(a)
    require_username(b)
    if a == b:
        raise InvalidInput(
            "Cannot create a relationship with yourself",
            code="SELF_RELATION",
            detail="不能关注或添加自己",
        )


class RelationshipService:
    """关系图服务"""

    def __init__(self, query_service: Optional[RelationshipQueryService] = None):
        self.query_service = query_service or relationship_query_service

    async def follow(
        self,
        session: AsyncSession,
        follower: str,
        following: str
    ) -> EdgeView:
        """
        关注用户

        Args:
            session: 数据库会话
            follower: 关注者用户名
            following: 被关注者用户名

        Returns:
            新建的 none 边

        Raises:
            InvalidInput: 用户名为空或相同
            Conflict: 该方向已存在任意状态的关系边
        """
        _validate_pair(follower, following)

        async with atomic(session):
            existing = await FollowDAO.get(session, follower, following)
            if existing:
                if existing.status == EdgeStatus.NONE.value:
                    raise Conflict("Already following", code="ALREADY_FOLLOWING", detail="已经关注了")
                raise Conflict(
                    "A relationship already exists",
                    code="EDGE_EXISTS",
                    detail="已存在好友请求或好友关系",
                )

            edge = await FollowDAO.create(session, follower, following, EdgeStatus.NONE.value)

        await self.query_service.invalidate(follower, following)
        logger.info(f"{follower} followed {following}")
        return EdgeView.model_validate(edge)

    async def unfollow(
        self,
        session: AsyncSession,
        follower: str,
        following: str
    ) -> bool:
        """
        取消关注

        删除 (follower, following) 的任意状态关系边，不存在时为空操作

        Returns:
            是否删除了关系边
        """
        require_username(follower)
        require_username(following)

        async with atomic(session):
            removed = await FollowDAO.delete(session, follower, following)

        if removed:
            await self.query_service.invalidate(follower, following)
            logger.info(f"{follower} unfollowed {following}")
        return removed

    async def request_or_accept_friend(
        self,
        session: AsyncSession,
        requester: str,
        recipient: str
    ) -> FriendRequestOutcome:
        """
        发送或通过好友请求

        对方此前已向当前用户发出请求时直接通过，
        两个方向各留一行 accepted 边；否则创建 pending 边

        Returns:
            requested 或 accepted

        Raises:
            InvalidInput: 用户名为空或相同
            Conflict: 已存在该方向的关系边，或关系数据不一致
        """
        _validate_pair(requester, recipient)

        async with atomic(session):
            forward, backward = await FollowDAO.get_pair(session, requester, recipient)

            if backward and backward.status == EdgeStatus.PENDING.value:
                if forward is None:
                    await FollowDAO.create(session, requester, recipient, EdgeStatus.ACCEPTED.value)
                elif forward.status == EdgeStatus.NONE.value:
                    # 单向关注被好友关系取代
                    await FollowDAO.accept(session, forward)
                else:
                    logger.warning(
                        f"⚠️  Inconsistent edges between {requester} and {recipient}: "
                        f"{requester}->{recipient}={forward.status}, "
                        f"{recipient}->{requester}={backward.status}"
                    )
                    raise Conflict(
                        "Relationship data is inconsistent",
                        code="INCONSISTENT_GRAPH",
                        detail="关系数据异常",
                    )
                await FollowDAO.accept(session, backward)
                outcome = FriendRequestOutcome.ACCEPTED

            elif forward is not None:
                if forward.status == EdgeStatus.ACCEPTED.value:
                    raise Conflict("Already friends", code="ALREADY_FRIENDS", detail="已经是好友了")
                if forward.status == EdgeStatus.PENDING.value:
                    raise Conflict(
                        "Friend request already sent",
                        code="ALREADY_REQUESTED",
                        detail="好友请求已发送",
                    )
                raise Conflict(
                    "A relationship already exists",
                    code="EDGE_EXISTS",
                    detail="已存在关注关系",
                )

            else:
                if backward is not None and backward.status == EdgeStatus.ACCEPTED.value:
                    logger.warning(
                        f"⚠️  Accepted edge {recipient}->{requester} has no mirror"
                    )
                    raise Conflict(
                        "Relationship data is inconsistent",
                        code="INCONSISTENT_GRAPH",
                        detail="关系数据异常",
                    )
                await FollowDAO.create(session, requester, recipient, EdgeStatus.PENDING.value)
                outcome = FriendRequestOutcome.REQUESTED

        await self.query_service.invalidate(requester, recipient)
        if outcome == FriendRequestOutcome.ACCEPTED:
            logger.info(f"🤝 {requester} and {recipient} are now friends")
        else:
            logger.info(f"{requester} sent a friend request to {recipient}")
        return outcome

    async def remove_friendship(
        self,
        session: AsyncSession,
        requester: str,
        recipient: str
    ) -> int:
        """
        解除好友 / 取消好友请求

        无条件删除两个方向的关系边

        Returns:
            删除的关系边行数
        """
        require_username(requester)
        require_username(recipient)

        async with atomic(session):
            removed = await FollowDAO.delete_pair(session, requester, recipient)

        if removed:
            await self.query_service.invalidate(requester, recipient)
            logger.info(f"{requester} removed relationship with {recipient} ({removed} edges)")
        return removed

    async def relationship_status(
        self,
        session: AsyncSession,
        a: str,
        b: str
    ) -> RelationshipStatusView:
        """
        查询 a 与 b 之间的关系（从 a 的视角）

        accepted 优先于 pending；只有一侧 accepted 时仍视为好友，并记录告警
        """
        require_username(a)
        require_username(b)

        forward, backward = await FollowDAO.get_pair(session, a, b)
        forward_status = forward.status if forward else None
        backward_status = backward.status if backward else None

        accepted = EdgeStatus.ACCEPTED.value
        if forward_status == accepted or backward_status == accepted:
            if forward_status != backward_status:
                logger.warning(f"⚠️  Asymmetric friendship between {a} and {b}")
            friendship = FriendshipStatus.FRIENDS
        elif forward_status == EdgeStatus.PENDING.value:
            friendship = FriendshipStatus.PENDING_SENT
        elif backward_status == EdgeStatus.PENDING.value:
            friendship = FriendshipStatus.PENDING_RECEIVED
        else:
            friendship = FriendshipStatus.NONE

        return RelationshipStatusView(
            is_following=forward_status == EdgeStatus.NONE.value,
            friendship_status=friendship,
        )


# 全局关系图服务实例
relationship_service = RelationshipService()
