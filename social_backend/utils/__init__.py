"""
工具模块
"""

from .auth import create_access_token, decode_access_token
from .id_generator import generate_ulid, generate_post_id, generate_comment_id
from .redis_client import redis_client, RedisClient

__all__ = [
    # 认证工具
    "create_access_token",
    "decode_access_token",

    # ID 生成器
    "generate_ulid",
    "generate_post_id",
    "generate_comment_id",

    # Redis
    "redis_client",
    "RedisClient",
]
