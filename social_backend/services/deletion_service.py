"""
级联删除服务

评论连同其全部回复及爱心记录作为一个原子单元删除
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.db.dao import CommentDAO, HeartDAO
from social_backend.db.models import PostComment
from social_backend.db.session import atomic
from social_backend.exceptions import Forbidden
from social_backend.models import DeletionResult, DeletedType
from social_backend.services.engagement_store import EngagementStore, require_username


class CascadeDeletionService:
    """级联删除服务"""

    @staticmethod
    def _check_owner(item: PostComment, actor: str, kind: str) -> None:
        if item.username != actor:
            raise Forbidden(
                f"Unauthorized to delete this {kind}",
                code="PERMISSION_DENIED",
                detail="无权限删除",
            )

    @staticmethod
    async def delete_comment(
        session: AsyncSession,
        post_id: str,
        comment_id: str,
        actor: str
    ) -> DeletionResult:
        """
        删除顶级评论及其全部回复

        爱心记录先于评论行删除；任一步失败整个单元回滚

        Args:
            session: 数据库会话
            post_id: 帖子ID
            comment_id: 评论ID
            actor: 当前用户名

        Returns:
            删除结果（被删ID、类型 comment、删除的回复数）

        Raises:
            NotFound: 帖子或顶级评论不存在
            Forbidden: 当前用户不是评论作者
            StorageFailure: 持久层失败（已回滚）
        """
        require_username(actor)

        async with atomic(session):
            post = await EngagementStore.load_post(session, post_id)
            comment = await EngagementStore.load_comment(session, post.id, comment_id)
            CascadeDeletionService._check_owner(comment, actor, "comment")

            reply_ids = await CommentDAO.get_reply_ids(session, post.id, comment.id)
            target_ids = [comment.id, *reply_ids]

            hearts_removed = await HeartDAO.delete_for_comments(session, target_ids)
            rows_removed = await CommentDAO.delete_many(session, target_ids)
            post.comments_count = max(0, (post.comments_count or 0) - rows_removed)

        logger.info(
            f"{actor} deleted comment {comment_id} on post {post_id} "
            f"({len(reply_ids)} replies, {hearts_removed} hearts)"
        )

        return DeletionResult(
            deleted_id=comment_id,
            deleted_type=DeletedType.COMMENT,
            deleted_replies_count=len(reply_ids),
        )

    @staticmethod
    async def delete_reply(
        session: AsyncSession,
        post_id: str,
        comment_id: str,
        reply_id: str,
        actor: str
    ) -> DeletionResult:
        """
        删除单条回复及其爱心记录

        Raises:
            NotFound: 帖子、评论或回复不存在
            Forbidden: 当前用户不是回复作者
            StorageFailure: 持久层失败（已回滚）
        """
        require_username(actor)

        async with atomic(session):
            post = await EngagementStore.load_post(session, post_id)
            reply = await EngagementStore.load_reply(session, post.id, comment_id, reply_id)
            CascadeDeletionService._check_owner(reply, actor, "reply")

            await HeartDAO.delete_for_comments(session, [reply.id])
            rows_removed = await CommentDAO.delete_many(session, [reply.id])
            post.comments_count = max(0, (post.comments_count or 0) - rows_removed)

        logger.info(f"{actor} deleted reply {reply_id} under comment {comment_id} on post {post_id}")

        return DeletionResult(
            deleted_id=reply_id,
            deleted_type=DeletedType.REPLY,
            deleted_replies_count=0,
        )


# 全局级联删除服务实例
cascade_deletion_service = CascadeDeletionService()
