"""
数据库初始化脚本

创建关系边、帖子、评论与爱心记录表
"""

import asyncio
from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from social_backend.db.base import get_database_url
from social_backend.db.models import Base


async def create_tables(engine: Optional[AsyncEngine] = None):
    """
    创建所有表

    Args:
        engine: 已有的异步引擎；为空时按配置临时创建
    """
    owned = engine is None
    if owned:
        engine = create_async_engine(get_database_url(async_mode=True), echo=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("✅ All tables created")

    if owned:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(create_tables())
