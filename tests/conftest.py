"""
测试公共夹具

使用内存 SQLite（aiosqlite）代替 PostgreSQL；
pysqlite 默认的事务处理不支持 SAVEPOINT，这里按 SQLAlchemy 文档的方式接管 BEGIN
"""

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from social_backend.db.models import Base, Post
from social_backend.services import (
    RelationshipQueryService, RelationshipService, EngagementService, CascadeDeletionService
)


class FakeCache:
    """内存版缓存，接口与 RedisClient 一致"""

    def __init__(self):
        self.store = {}
        self.connected = True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


def enable_savepoints(engine):
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


@pytest.fixture
async def engine():
    engine = enable_savepoints(create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
    ))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def file_engine(tmp_path):
    """基于文件的数据库，多个会话各自持有连接"""
    engine = enable_savepoints(create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'social.db'}"))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(engine):
    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def query_service(cache):
    return RelationshipQueryService(cache=cache)


@pytest.fixture
def relationships(query_service):
    return RelationshipService(query_service=query_service)


@pytest.fixture
def engagement():
    return EngagementService()


@pytest.fixture
def deletion():
    return CascadeDeletionService()


@pytest.fixture
async def post(session):
    """alice 发布的一条帖子"""
    post = Post(
        id="p1",
        username="alice",
        message="hello",
        likes=0,
        dislikes=0,
        liked_by=[],
        disliked_by=[],
        comments_count=0,
    )
    session.add(post)
    await session.commit()
    return post
