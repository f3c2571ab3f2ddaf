"""
帖子与互动模块路由
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.api.deps import get_current_username, get_db_session
from social_backend.models import ApiResponse, ActionRequest, PostCreate, PostUpdate
from social_backend.services import engagement_service, cascade_deletion_service, post_service

router = APIRouter()


@router.post("/posts", response_model=ApiResponse, status_code=201)
async def create_post(
    body: PostCreate,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """发帖"""
    snapshot = await post_service.create_post(session, current_user, body.message, body.post_id)
    return ApiResponse(success=True, message="Post created", data=snapshot.model_dump(mode="json"))


@router.get("/posts", response_model=ApiResponse)
async def list_user_posts(
    username: str = Query(..., min_length=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session)
):
    """用户发布的帖子，按发布时间倒序"""
    result = await post_service.list_user_posts(session, username, limit, offset)
    return ApiResponse(success=True, data=result.model_dump(mode="json"))


@router.get("/posts/{post_id}", response_model=ApiResponse)
async def get_post(
    post_id: str,
    session: AsyncSession = Depends(get_db_session)
):
    """获取帖子及完整评论树"""
    snapshot = await post_service.get_post(session, post_id)
    return ApiResponse(success=True, data=snapshot.model_dump(mode="json"))


@router.put("/posts/{post_id}", response_model=ApiResponse)
async def update_post(
    post_id: str,
    body: PostUpdate,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """编辑帖子（仅作者）"""
    snapshot = await post_service.update_post(session, post_id, current_user, body.message)
    return ApiResponse(success=True, message="Post updated", data=snapshot.model_dump(mode="json"))


@router.delete("/posts/{post_id}", response_model=ApiResponse)
async def delete_post(
    post_id: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """删除帖子及其评论树（仅作者）"""
    result = await post_service.delete_post(session, post_id, current_user)
    return ApiResponse(success=True, message="Post deleted", data=result.model_dump(mode="json"))


@router.post("/posts/{post_id}/actions", response_model=ApiResponse)
async def apply_action(
    post_id: str,
    body: ActionRequest,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """
    互动动作

    - like / dislike：切换
    - heart_comment / heart_reply：切换，需要 comment_id（及 reply_id）
    - comment / reply：追加，需要 text（reply 还需要 comment_id）
    """
    snapshot = await engagement_service.apply_action(
        session, post_id, body.action, current_user, body
    )
    return ApiResponse(success=True, data=snapshot.model_dump(mode="json"))


@router.delete("/posts/{post_id}/comments/{comment_id}", response_model=ApiResponse)
async def delete_comment(
    post_id: str,
    comment_id: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """删除评论及其全部回复（仅作者）"""
    result = await cascade_deletion_service.delete_comment(session, post_id, comment_id, current_user)
    return ApiResponse(success=True, message="Comment and all replies deleted", data=result.model_dump(mode="json"))


@router.delete("/posts/{post_id}/comments/{comment_id}/replies/{reply_id}", response_model=ApiResponse)
async def delete_reply(
    post_id: str,
    comment_id: str,
    reply_id: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """删除回复（仅作者）"""
    result = await cascade_deletion_service.delete_reply(
        session, post_id, comment_id, reply_id, current_user
    )
    return ApiResponse(success=True, message="Reply deleted", data=result.model_dump(mode="json"))
