"""
互动服务

对单个帖子原子地应用一个互动动作（点赞、点踩、爱心、评论、回复），
成功后返回帖子的完整互动快照
"""

from typing import Optional, Union
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.config.settings import settings
from social_backend.db.dao import CommentDAO
from social_backend.db.models import Post
from social_backend.db.session import atomic
from social_backend.exceptions import Conflict, InvalidInput, NotFound
from social_backend.models import ActionPayload, EngagementAction, EngagementSnapshot
from social_backend.services.engagement_store import (
    EngagementStore, normalize_text, require_username
)


class EngagementService:
    """互动服务"""

    def __init__(self, store: Optional[EngagementStore] = None):
        self.store = store or EngagementStore()
        self._handlers = {
            EngagementAction.LIKE: self._like,
            EngagementAction.DISLIKE: self._dislike,
            EngagementAction.HEART_COMMENT: self._heart_comment,
            EngagementAction.HEART_REPLY: self._heart_reply,
            EngagementAction.COMMENT: self._comment,
            EngagementAction.REPLY: self._reply,
        }

    async def apply_action(
        self,
        session: AsyncSession,
        post_id: str,
        action: Union[EngagementAction, str],
        actor: str,
        payload: Optional[ActionPayload] = None
    ) -> EngagementSnapshot:
        """
        应用互动动作

        动作失败时不产生任何写入；成功的写入在同一事务单元内完成

        Args:
            session: 数据库会话
            post_id: 帖子ID
            action: 动作名（like / dislike / heart_comment / heart_reply / comment / reply）
            actor: 当前用户名
            payload: 动作参数（comment_id / reply_id / text）

        Returns:
            动作完成后的互动快照

        Raises:
            InvalidInput: 动作名无效、用户名或内容为空
            NotFound: 帖子 / 评论 / 回复不存在
            Conflict: 并发写冲突或评论ID重复
        """
        try:
            action = EngagementAction(action)
        except ValueError:
            raise InvalidInput(
                f"Invalid action: {action}",
                code="INVALID_ACTION",
                detail="无效的互动动作",
            ) from None
        require_username(actor)
        payload = payload or ActionPayload()
        handler = self._handlers[action]

        async with atomic(session):
            post = await self.store.load_post(session, post_id)
            await handler(session, post, actor, payload)

        return await self.store.snapshot(session, post)

    # ==================== 点赞 / 点踩 ====================

    async def _like(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        liked_by, disliked_by = self._toggle_reaction(
            list(post.liked_by or []), list(post.disliked_by or []), actor
        )
        self.store.write_reactions(post, liked_by, disliked_by)

    async def _dislike(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        disliked_by, liked_by = self._toggle_reaction(
            list(post.disliked_by or []), list(post.liked_by or []), actor
        )
        self.store.write_reactions(post, liked_by, disliked_by)

    @staticmethod
    def _toggle_reaction(chosen: list, opposite: list, actor: str):
        """
        切换 actor 在 chosen 集合中的成员关系

        从 opposite 迁移过来时先移除，保证两个集合互斥
        """
        if actor in opposite:
            opposite = [name for name in opposite if name != actor]

        if actor in chosen:
            chosen = [name for name in chosen if name != actor]
        else:
            chosen = chosen + [actor]

        return chosen, opposite

    # ==================== 爱心 ====================

    async def _heart_comment(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        comment = await self.store.load_comment(session, post.id, payload.comment_id)
        hearted, count = await self.store.toggle_heart(session, comment.id, actor)
        logger.debug(f"{actor} {'hearted' if hearted else 'unhearted'} comment {comment.id} ({count})")

    async def _heart_reply(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        reply = await self.store.load_reply(session, post.id, payload.comment_id, payload.reply_id)
        hearted, count = await self.store.toggle_heart(session, reply.id, actor)
        logger.debug(f"{actor} {'hearted' if hearted else 'unhearted'} reply {reply.id} ({count})")

    # ==================== 评论 / 回复 ====================

    async def _comment(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        text = normalize_text(payload.text, settings.COMMENT_MAX_LENGTH, "Comment")

        # 调用方指定的评论ID必须未被占用
        if payload.comment_id and await CommentDAO.get_by_id(session, payload.comment_id):
            raise Conflict(
                "Comment id already exists",
                code="DUPLICATE_COMMENT_ID",
                detail="评论ID已存在",
            )

        comment = await self.store.add_comment(
            session, post, actor, text, comment_id=payload.comment_id
        )
        logger.info(f"{actor} commented on post {post.id}: {comment.id}")

    async def _reply(self, session: AsyncSession, post: Post, actor: str, payload: ActionPayload):
        text = normalize_text(payload.text, settings.COMMENT_MAX_LENGTH, "Reply")

        try:
            parent = await self.store.load_comment(session, post.id, payload.comment_id)
        except NotFound:
            # 目标是回复时不允许继续嵌套
            target = await CommentDAO.get_by_id(session, payload.comment_id) if payload.comment_id else None
            if target is not None and target.post_id == post.id:
                raise InvalidInput(
                    "Cannot reply to a reply",
                    code="MAX_DEPTH_EXCEEDED",
                    detail="不能回复回复",
                )
            raise

        reply = await self.store.add_comment(
            session, post, actor, text, parent_comment_id=parent.id
        )
        logger.info(f"{actor} replied to comment {parent.id} on post {post.id}: {reply.id}")


# 全局互动服务实例
engagement_service = EngagementService()
