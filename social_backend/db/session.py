"""
数据库事务单元

atomic() 包裹所有多行写操作
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.ext.asyncio import AsyncSession

from social_backend.exceptions import Conflict, StorageFailure


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    事务单元

    会话已在事务中时使用 SAVEPOINT，否则开启顶层事务。
    块内任何异常都会回滚整个单元；持久层异常统一转换为
    Conflict（并发写）或 StorageFailure 后再抛出。

    Yields:
        AsyncSession: 同一个会话
    """
    if session.in_transaction():
        ctx = session.begin_nested()
    else:
        ctx = session.begin()

    try:
        async with ctx:
            yield session
            await session.flush()
    except (StaleDataError, IntegrityError) as e:
        logger.warning(f"Concurrent write rejected: {e}")
        raise Conflict(
            "Resource was modified concurrently",
            code="CONCURRENT_UPDATE",
            detail="资源已被其他请求修改，请重试",
        ) from e
    except SQLAlchemyError as e:
        logger.error(f"Storage failure, transaction rolled back: {e}")
        raise StorageFailure(
            "Storage failure",
            detail="存储失败，操作已回滚",
        ) from e
