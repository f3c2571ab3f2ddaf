"""
关系图服务测试
"""

import pytest
from sqlalchemy import select, func

from social_backend.db.dao import FollowDAO
from social_backend.db.models import UserFollow
from social_backend.exceptions import Conflict, InvalidInput
from social_backend.models import EdgeStatus, FriendRequestOutcome, FriendshipStatus


async def count_edges(session, status=None):
    query = select(func.count()).select_from(UserFollow)
    if status:
        query = query.where(UserFollow.status == status)
    return (await session.execute(query)).scalar()


async def test_follow_creates_one_way_edge(session, relationships):
    edge = await relationships.follow(session, "alice", "bob")

    assert edge.follower == "alice"
    assert edge.following == "bob"
    assert edge.status == EdgeStatus.NONE

    status = await relationships.relationship_status(session, "alice", "bob")
    assert status.is_following is True
    assert status.friendship_status == FriendshipStatus.NONE

    reverse = await relationships.relationship_status(session, "bob", "alice")
    assert reverse.is_following is False


async def test_follow_self_is_rejected(session, relationships):
    with pytest.raises(InvalidInput) as exc_info:
        await relationships.follow(session, "alice", "alice")
    assert exc_info.value.code == "SELF_RELATION"
    assert await count_edges(session) == 0


async def test_follow_empty_username_is_rejected(session, relationships):
    with pytest.raises(InvalidInput):
        await relationships.follow(session, "", "bob")


async def test_follow_twice_conflicts(session, relationships):
    await relationships.follow(session, "alice", "bob")

    with pytest.raises(Conflict) as exc_info:
        await relationships.follow(session, "alice", "bob")
    assert exc_info.value.code == "ALREADY_FOLLOWING"
    assert await count_edges(session) == 1


async def test_follow_after_friend_request_conflicts(session, relationships):
    await relationships.request_or_accept_friend(session, "alice", "bob")

    with pytest.raises(Conflict) as exc_info:
        await relationships.follow(session, "alice", "bob")
    assert exc_info.value.code == "EDGE_EXISTS"


async def test_unfollow_is_idempotent(session, relationships):
    await relationships.follow(session, "alice", "bob")

    assert await relationships.unfollow(session, "alice", "bob") is True
    assert await relationships.unfollow(session, "alice", "bob") is False

    status = await relationships.relationship_status(session, "alice", "bob")
    assert status.is_following is False
    assert await count_edges(session) == 0


async def test_follow_again_after_unfollow(session, relationships):
    await relationships.follow(session, "alice", "bob")
    await relationships.unfollow(session, "alice", "bob")

    edge = await relationships.follow(session, "alice", "bob")
    assert edge.status == EdgeStatus.NONE


async def test_friend_request_then_accept(session, relationships):
    outcome = await relationships.request_or_accept_friend(session, "alice", "bob")
    assert outcome == FriendRequestOutcome.REQUESTED

    sent = await relationships.relationship_status(session, "alice", "bob")
    received = await relationships.relationship_status(session, "bob", "alice")
    assert sent.friendship_status == FriendshipStatus.PENDING_SENT
    assert received.friendship_status == FriendshipStatus.PENDING_RECEIVED

    outcome = await relationships.request_or_accept_friend(session, "bob", "alice")
    assert outcome == FriendRequestOutcome.ACCEPTED

    for a, b in (("alice", "bob"), ("bob", "alice")):
        status = await relationships.relationship_status(session, a, b)
        assert status.friendship_status == FriendshipStatus.FRIENDS
        assert status.is_following is False

    # 每段好友关系恰好两行 accepted 边
    assert await count_edges(session, "accepted") == 2
    assert await count_edges(session) == 2


async def test_duplicate_friend_request_conflicts(session, relationships):
    await relationships.request_or_accept_friend(session, "alice", "bob")

    with pytest.raises(Conflict) as exc_info:
        await relationships.request_or_accept_friend(session, "alice", "bob")
    assert exc_info.value.code == "ALREADY_REQUESTED"


async def test_friend_request_when_already_friends_conflicts(session, relationships):
    await relationships.request_or_accept_friend(session, "alice", "bob")
    await relationships.request_or_accept_friend(session, "bob", "alice")

    with pytest.raises(Conflict) as exc_info:
        await relationships.request_or_accept_friend(session, "alice", "bob")
    assert exc_info.value.code == "ALREADY_FRIENDS"
    assert await count_edges(session, "accepted") == 2


async def test_friend_request_to_self_is_rejected(session, relationships):
    with pytest.raises(InvalidInput):
        await relationships.request_or_accept_friend(session, "alice", "alice")


async def test_accept_promotes_existing_follow(session, relationships):
    await relationships.follow(session, "alice", "bob")
    await relationships.request_or_accept_friend(session, "bob", "alice")

    outcome = await relationships.request_or_accept_friend(session, "alice", "bob")
    assert outcome == FriendRequestOutcome.ACCEPTED

    forward, backward = await FollowDAO.get_pair(session, "alice", "bob")
    assert forward.status == "accepted"
    assert backward.status == "accepted"
    assert forward.accepted_at is not None
    assert await count_edges(session) == 2


async def test_inconsistent_accepted_edge_is_reported(session, relationships):
    await FollowDAO.create(session, "bob", "alice", "accepted")
    await session.commit()

    with pytest.raises(Conflict) as exc_info:
        await relationships.request_or_accept_friend(session, "alice", "bob")
    assert exc_info.value.code == "INCONSISTENT_GRAPH"


async def test_remove_friendship_deletes_both_edges(session, relationships):
    await relationships.request_or_accept_friend(session, "alice", "bob")
    await relationships.request_or_accept_friend(session, "bob", "alice")

    removed = await relationships.remove_friendship(session, "alice", "bob")
    assert removed == 2
    assert await count_edges(session) == 0

    status = await relationships.relationship_status(session, "bob", "alice")
    assert status.friendship_status == FriendshipStatus.NONE


async def test_remove_friendship_cancels_pending_request(session, relationships):
    await relationships.request_or_accept_friend(session, "alice", "bob")

    assert await relationships.remove_friendship(session, "bob", "alice") == 1
    assert await relationships.remove_friendship(session, "bob", "alice") == 0


async def test_status_prefers_accepted_over_pending(session, relationships):
    await FollowDAO.create(session, "alice", "bob", "accepted")
    await FollowDAO.create(session, "bob", "alice", "pending")
    await session.commit()

    status = await relationships.relationship_status(session, "alice", "bob")
    assert status.friendship_status == FriendshipStatus.FRIENDS
