"""
帖子服务测试
"""

import pytest
from sqlalchemy import select, func

from social_backend.db.models import Post, PostComment, CommentHeart
from social_backend.exceptions import Conflict, Forbidden, InvalidInput, NotFound
from social_backend.models import ActionPayload
from social_backend.services import PostService


async def test_create_post(session):
    snapshot = await PostService.create_post(session, "alice", "  first post ")

    assert snapshot.post_id.startswith("post_")
    assert snapshot.username == "alice"
    assert snapshot.message == "first post"
    assert (snapshot.likes, snapshot.dislikes, snapshot.comments_count) == (0, 0, 0)
    assert snapshot.comments == []


async def test_create_post_with_duplicate_id(session, post):
    with pytest.raises(Conflict) as exc_info:
        await PostService.create_post(session, "bob", "again", post_id="p1")
    assert exc_info.value.code == "DUPLICATE_POST_ID"


async def test_create_empty_post_is_rejected(session):
    with pytest.raises(InvalidInput):
        await PostService.create_post(session, "alice", "   ")


async def test_get_missing_post(session):
    with pytest.raises(NotFound):
        await PostService.get_post(session, "nope")


async def test_update_post_by_owner(session, post):
    snapshot = await PostService.update_post(session, "p1", "alice", "edited")
    assert snapshot.message == "edited"

    with pytest.raises(Forbidden):
        await PostService.update_post(session, "p1", "bob", "hijacked")

    snapshot = await PostService.get_post(session, "p1")
    assert snapshot.message == "edited"


async def test_delete_post_removes_comment_tree(session, engagement, post):
    snapshot = await engagement.apply_action(
        session, "p1", "comment", "bob", ActionPayload(text="hi")
    )
    c1 = snapshot.comments[0].comment_id
    await engagement.apply_action(
        session, "p1", "reply", "alice", ActionPayload(comment_id=c1, text="yo")
    )
    await engagement.apply_action(
        session, "p1", "heart_comment", "alice", ActionPayload(comment_id=c1)
    )

    with pytest.raises(Forbidden):
        await PostService.delete_post(session, "p1", "bob")

    result = await PostService.delete_post(session, "p1", "alice")
    assert result.post_id == "p1"
    assert result.deleted_comments_count == 2

    for model in (Post, PostComment, CommentHeart):
        count = (await session.execute(select(func.count()).select_from(model))).scalar()
        assert count == 0

    with pytest.raises(NotFound):
        await PostService.get_post(session, "p1")


async def test_list_user_posts_newest_first(session, engagement):
    for post_id in ("a1", "a2", "a3"):
        await PostService.create_post(session, "alice", f"post {post_id}", post_id=post_id)
    await PostService.create_post(session, "bob", "not mine", post_id="b1")
    await engagement.apply_action(session, "a2", "comment", "bob", ActionPayload(text="hi"))

    page = await PostService.list_user_posts(session, "alice", limit=2)
    assert [p.post_id for p in page.posts] == ["a3", "a2"]
    assert page.total == 3
    assert page.has_more is True
    # 列表中的帖子带完整评论树
    assert page.posts[1].comments[0].text == "hi"

    page = await PostService.list_user_posts(session, "alice", limit=2, offset=2)
    assert [p.post_id for p in page.posts] == ["a1"]
    assert page.has_more is False


async def test_list_user_posts_clamps_page(session):
    page = await PostService.list_user_posts(session, "nobody", limit=0, offset=-1)
    assert (page.limit, page.offset) == (1, 0)
    assert page.posts == []
    assert page.total == 0

    with pytest.raises(InvalidInput):
        await PostService.list_user_posts(session, "")
