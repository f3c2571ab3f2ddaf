"""
API v1 路由汇总
"""

from fastapi import APIRouter

from .relationship import router as relationship_router
from .post import router as post_router

# 创建 v1 API 路由
api_router = APIRouter()

# 注册子路由
api_router.include_router(relationship_router, tags=["Relationship"])
api_router.include_router(post_router, tags=["Post"])
