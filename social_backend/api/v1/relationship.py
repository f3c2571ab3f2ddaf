"""
关系图模块路由
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.api.deps import get_current_username, get_db_session
from social_backend.models import ApiResponse
from social_backend.services import relationship_service, relationship_query_service

router = APIRouter()


@router.post("/relationships/{username}/follow", response_model=ApiResponse, status_code=201)
async def follow_user(
    username: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """
    关注用户

    - 不能关注自己
    - 已存在任意状态的关系边时返回 409
    """
    edge = await relationship_service.follow(session, current_user, username)
    return ApiResponse(
        success=True,
        message=f"{current_user} is now following {username}",
        data=edge.model_dump(mode="json"),
    )


@router.delete("/relationships/{username}/follow", response_model=ApiResponse)
async def unfollow_user(
    username: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """取消关注（不存在时为空操作）"""
    removed = await relationship_service.unfollow(session, current_user, username)
    return ApiResponse(success=True, message="Unfollowed", data={"removed": removed})


@router.post("/relationships/{username}/friend", response_model=ApiResponse)
async def add_friend(
    username: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """
    发送或通过好友请求

    - 对方已向当前用户发出请求时直接通过
    """
    outcome = await relationship_service.request_or_accept_friend(session, current_user, username)
    return ApiResponse(success=True, message=f"Friend request {outcome.value}", data={"result": outcome.value})


@router.delete("/relationships/{username}/friend", response_model=ApiResponse)
async def remove_friend(
    username: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """解除好友 / 取消好友请求"""
    removed = await relationship_service.remove_friendship(session, current_user, username)
    return ApiResponse(success=True, message="Relationship removed", data={"removed_edges": removed})


@router.get("/relationships/{username}/status", response_model=ApiResponse)
async def relationship_status(
    username: str,
    current_user: str = Depends(get_current_username),
    session: AsyncSession = Depends(get_db_session)
):
    """当前用户与目标用户之间的关系"""
    view = await relationship_service.relationship_status(session, current_user, username)
    return ApiResponse(success=True, data=view.model_dump(mode="json"))


@router.get("/relationships/{username}/counts", response_model=ApiResponse)
async def relationship_counts(
    username: str,
    session: AsyncSession = Depends(get_db_session)
):
    """关注 / 粉丝 / 好友数量"""
    counts = await relationship_query_service.counts(session, username)
    return ApiResponse(success=True, data=counts.model_dump(mode="json"))


@router.get("/relationships/{username}/followers", response_model=ApiResponse)
async def list_followers(
    username: str,
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session)
):
    """粉丝列表"""
    result = await relationship_query_service.list_followers(session, username, limit, offset)
    return ApiResponse(success=True, data=result.model_dump(mode="json"))


@router.get("/relationships/{username}/following", response_model=ApiResponse)
async def list_following(
    username: str,
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session)
):
    """关注列表"""
    result = await relationship_query_service.list_following(session, username, limit, offset)
    return ApiResponse(success=True, data=result.model_dump(mode="json"))


@router.get("/relationships/{username}/friends", response_model=ApiResponse)
async def list_friends(
    username: str,
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_db_session)
):
    """好友列表"""
    result = await relationship_query_service.list_friends(session, username, limit, offset)
    return ApiResponse(success=True, data=result.model_dump(mode="json"))
