"""
FastAPI 应用入口
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from loguru import logger
from sqlalchemy import text

from social_backend.config import settings
from social_backend.api import api_v1_router
from social_backend.db import base
from social_backend.db.base import init_db, close_db
from social_backend.db.init_db import create_tables
from social_backend.exceptions import SocialError
from social_backend.models import ErrorResponse
from social_backend.utils.redis_client import redis_client


async def check_and_init_database():
    """初始化数据库连接池，按配置自动建表"""
    if not settings.DATABASE_ENABLED:
        logger.info("📦 Database disabled, skipping initialization")
        return

    try:
        await init_db()
        logger.success("✅ Database connection pool initialized")

        if settings.DATABASE_AUTO_CREATE:
            logger.info("📦 Creating database tables...")
            await create_tables(base.async_engine)

    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时执行
    logger.info(f"🚀 Starting {settings.APP_NAME}...")

    # 初始化 Redis（仅用于关系数量缓存，失败不影响启动）
    if settings.REDIS_ENABLED:
        try:
            await redis_client.connect()
            logger.success("✅ Redis initialized")
        except Exception as e:
            logger.error(f"❌ Redis init failed: {e}")
            await redis_client.close()

    await check_and_init_database()

    logger.success("🎉 Application started successfully!")

    yield

    # 关闭时执行
    logger.info("👋 Shutting down...")

    await redis_client.close()

    if settings.DATABASE_ENABLED:
        try:
            await close_db()
            logger.info("✅ Database connections closed")
        except Exception as e:
            logger.error(f"❌ Database close failed: {e}")

    logger.success("✅ Application shutdown complete")


# 创建 FastAPI 应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册 API 路由
app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
async def root():
    """健康检查"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "ok"
    }


@app.get("/health")
async def health_check():
    """健康检查（详细）"""
    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {}
    }

    # 检查 Redis
    if redis_client.connected:
        try:
            await redis_client.client.ping()
            health_status["services"]["redis"] = "healthy"
        except Exception:
            health_status["services"]["redis"] = "unhealthy"
            health_status["status"] = "degraded"
    else:
        health_status["services"]["redis"] = "not_initialized"

    # 检查数据库
    if settings.DATABASE_ENABLED:
        try:
            if base.async_engine:
                async with base.async_engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                health_status["services"]["database"] = "healthy"
            else:
                health_status["services"]["database"] = "not_initialized"
        except Exception:
            health_status["services"]["database"] = "unhealthy"
            health_status["status"] = "degraded"
    else:
        health_status["services"]["database"] = "disabled"

    return health_status


@app.exception_handler(SocialError)
async def social_error_handler(request: Request, exc: SocialError):
    """业务异常统一转换为 ErrorResponse"""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")

    body = ErrorResponse(code=exc.code, message=exc.message, error=exc.to_error())
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# 全局异常处理
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """全局异常处理"""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
            "error": {
                "type": type(exc).__name__,
                "message": str(exc)
            }
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "social_backend.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
