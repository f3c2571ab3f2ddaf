"""
API 依赖注入 - 认证、数据库连接等
"""

from typing import AsyncIterator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.config import settings
from social_backend.db.base import get_db
from social_backend.utils.auth import decode_access_token

# JWT 认证
security = HTTPBearer()


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """
    获取数据库会话（依赖注入用）

    Yields:
        AsyncSession: 数据库会话
    """
    if not settings.DATABASE_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not enabled"
        )

    async for session in get_db():
        yield session


async def get_current_username(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """
    从 JWT Token 中解析当前用户名（sub）

    Returns:
        受信任的用户名
    """
    payload = decode_access_token(credentials.credentials)
    username = payload.get("sub") if payload else None
    if not username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )
    return username
