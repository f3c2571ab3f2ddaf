"""
级联删除服务测试
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from social_backend.db.dao import CommentDAO, HeartDAO
from social_backend.db.models import PostComment
from social_backend.exceptions import Forbidden, NotFound, StorageFailure
from social_backend.models import ActionPayload, DeletedType
from social_backend.services import PostService


async def comment(engagement, session, actor, text="hi", comment_id=None):
    snapshot = await engagement.apply_action(
        session, "p1", "comment", actor, ActionPayload(text=text, comment_id=comment_id)
    )
    return snapshot.comments[-1].comment_id


async def reply(engagement, session, comment_id, actor, text="re"):
    snapshot = await engagement.apply_action(
        session, "p1", "reply", actor, ActionPayload(comment_id=comment_id, text=text)
    )
    return snapshot.find_comment(comment_id).replies[-1].comment_id


async def heart(engagement, session, actor, comment_id, reply_id=None):
    action = "heart_reply" if reply_id else "heart_comment"
    return await engagement.apply_action(
        session, "p1", action, actor, ActionPayload(comment_id=comment_id, reply_id=reply_id)
    )


async def count_rows(session):
    return (await session.execute(select(func.count()).select_from(PostComment))).scalar()


async def test_delete_comment_removes_replies(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob", comment_id="c1")
    r1 = await reply(engagement, session, c1, "alice")
    await heart(engagement, session, "carol", c1, r1)

    result = await deletion.delete_comment(session, "p1", c1, "bob")

    assert result.deleted_id == "c1"
    assert result.deleted_type == DeletedType.COMMENT
    assert result.deleted_replies_count == 1

    # 被删回复不能再被点爱心
    with pytest.raises(NotFound):
        await heart(engagement, session, "carol", c1, r1)

    snapshot = await PostService.get_post(session, "p1")
    assert snapshot.comments == []
    assert snapshot.comments_count == 0
    assert await HeartDAO.count_for_comments(session, [c1, r1]) == 0


async def test_delete_comment_by_other_user_is_forbidden(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob")
    await reply(engagement, session, c1, "alice")

    with pytest.raises(Forbidden):
        await deletion.delete_comment(session, "p1", c1, "carol")

    # 帖子作者也不能删除他人的评论
    with pytest.raises(Forbidden):
        await deletion.delete_comment(session, "p1", c1, "alice")

    assert await count_rows(session) == 2


async def test_delete_comment_with_many_replies(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob")
    replies = [await reply(engagement, session, c1, f"user{i}") for i in range(4)]
    for reply_id in replies:
        await heart(engagement, session, "bob", c1, reply_id)
    await heart(engagement, session, "alice", c1)

    keep = await comment(engagement, session, "dave")
    await heart(engagement, session, "alice", keep)

    result = await deletion.delete_comment(session, "p1", c1, "bob")
    assert result.deleted_replies_count == 4

    # 只剩另一条评论
    assert await count_rows(session) == 1
    assert await HeartDAO.count_for_comments(session, [c1, *replies]) == 0
    assert await HeartDAO.count_for_comments(session, [keep]) == 1

    snapshot = await PostService.get_post(session, "p1")
    assert [c.comment_id for c in snapshot.comments] == [keep]
    assert snapshot.comments_count == 1


async def test_delete_comment_missing(session, deletion, post):
    with pytest.raises(NotFound) as exc_info:
        await deletion.delete_comment(session, "p1", "missing", "bob")
    assert exc_info.value.code == "COMMENT_NOT_FOUND"

    with pytest.raises(NotFound) as exc_info:
        await deletion.delete_comment(session, "nope", "missing", "bob")
    assert exc_info.value.code == "POST_NOT_FOUND"


async def test_delete_comment_rolls_back_on_storage_failure(
    session, engagement, deletion, post, monkeypatch
):
    c1 = await comment(engagement, session, "bob")
    r1 = await reply(engagement, session, c1, "alice")
    await heart(engagement, session, "carol", c1)
    await heart(engagement, session, "carol", c1, r1)

    async def broken_delete_many(session, comment_ids):
        raise OperationalError("DELETE", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CommentDAO, "delete_many", staticmethod(broken_delete_many))

    with pytest.raises(StorageFailure):
        await deletion.delete_comment(session, "p1", c1, "bob")

    # 爱心记录的删除随整个单元回滚
    assert await HeartDAO.count_for_comments(session, [c1, r1]) == 2
    assert await count_rows(session) == 2

    snapshot = await PostService.get_post(session, "p1")
    assert snapshot.comments_count == 2
    assert snapshot.find_comment(c1).heart_count == 1


async def test_delete_reply(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob")
    r1 = await reply(engagement, session, c1, "alice")
    r2 = await reply(engagement, session, c1, "carol")
    await heart(engagement, session, "bob", c1, r1)

    result = await deletion.delete_reply(session, "p1", c1, r1, "alice")
    assert result.deleted_id == r1
    assert result.deleted_type == DeletedType.REPLY
    assert result.deleted_replies_count == 0

    snapshot = await PostService.get_post(session, "p1")
    remaining = snapshot.find_comment(c1)
    assert [r.comment_id for r in remaining.replies] == [r2]
    assert snapshot.comments_count == 2
    assert await HeartDAO.count_for_comments(session, [r1]) == 0


async def test_delete_reply_by_other_user_is_forbidden(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob")
    r1 = await reply(engagement, session, c1, "alice")

    with pytest.raises(Forbidden):
        await deletion.delete_reply(session, "p1", c1, r1, "bob")

    assert await count_rows(session) == 2


async def test_delete_reply_missing(session, engagement, deletion, post):
    c1 = await comment(engagement, session, "bob")

    with pytest.raises(NotFound) as exc_info:
        await deletion.delete_reply(session, "p1", c1, "missing", "bob")
    assert exc_info.value.code == "REPLY_NOT_FOUND"

    with pytest.raises(NotFound) as exc_info:
        await deletion.delete_reply(session, "p1", "missing", "r1", "bob")
    assert exc_info.value.code == "COMMENT_NOT_FOUND"


async def test_comment_reply_heart_delete_scenario(session, engagement, deletion):
    await PostService.create_post(session, "erin", "post 42", post_id="42")

    snapshot = await engagement.apply_action(session, "42", "comment", "alice", ActionPayload(text="hi"))
    c1 = snapshot.comments[0].comment_id
    snapshot = await engagement.apply_action(
        session, "42", "reply", "bob", ActionPayload(comment_id=c1, text="hey")
    )
    r1 = snapshot.comments[0].replies[0].comment_id

    snapshot = await engagement.apply_action(
        session, "42", "heart_reply", "alice", ActionPayload(comment_id=c1, reply_id=r1)
    )
    hearted = snapshot.comments[0].replies[0]
    assert hearted.heart_count == 1
    assert hearted.hearted_by == ["alice"]

    result = await deletion.delete_comment(session, "42", c1, "alice")
    assert result.deleted_type == DeletedType.COMMENT
    assert result.deleted_replies_count == 1

    with pytest.raises(NotFound):
        await engagement.apply_action(
            session, "42", "heart_reply", "alice", ActionPayload(comment_id=c1, reply_id=r1)
        )
