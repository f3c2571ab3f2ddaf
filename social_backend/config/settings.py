"""
应用全局配置

从 config.yaml 加载配置，支持环境变量覆盖
"""

import yaml
from pathlib import Path
from typing import Optional, List
import os


def _as_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class Settings:
    """应用全局配置（从 config.yaml 加载）"""

    def __init__(self, config_path: Optional[Path] = None):
        # 加载 config.yaml（可通过 SOCIAL_CONFIG 指定路径）
        if config_path is None:
            config_path = Path(os.getenv(
                "SOCIAL_CONFIG",
                Path(__file__).parent.parent.parent / "config.yaml"
            ))
        with open(config_path, 'r', encoding='utf-8') as f:
            self._config = yaml.safe_load(f)

    # ==================== 应用基础配置 ====================
    @property
    def APP_NAME(self) -> str:
        return os.getenv("APP_NAME", self._config["app"]["name"])

    @property
    def APP_VERSION(self) -> str:
        return os.getenv("APP_VERSION", self._config["app"]["version"])

    @property
    def API_V1_PREFIX(self) -> str:
        return os.getenv("API_V1_PREFIX", self._config["app"]["api_prefix"])

    @property
    def DEBUG(self) -> bool:
        return _as_bool(os.getenv("DEBUG", str(self._config["app"]["debug"])))

    # ==================== 数据库配置 ====================
    @property
    def DATABASE_ENABLED(self) -> bool:
        return _as_bool(os.getenv("DATABASE_ENABLED", str(self._config["database"]["enabled"])))

    @property
    def DATABASE_URL(self) -> Optional[str]:
        if not self.DATABASE_ENABLED:
            return None
        return os.getenv("DATABASE_URL", self._config["database"]["url"])

    @property
    def DATABASE_POOL_SIZE(self) -> int:
        return int(os.getenv("DATABASE_POOL_SIZE", self._config["database"]["pool_size"]))

    @property
    def DATABASE_MAX_OVERFLOW(self) -> int:
        return int(os.getenv("DATABASE_MAX_OVERFLOW", self._config["database"]["max_overflow"]))

    @property
    def DATABASE_AUTO_CREATE(self) -> bool:
        return _as_bool(os.getenv("DATABASE_AUTO_CREATE", str(self._config["database"]["auto_create"])))

    # ==================== Redis 配置 ====================
    @property
    def REDIS_ENABLED(self) -> bool:
        return _as_bool(os.getenv("REDIS_ENABLED", str(self._config["redis"]["enabled"])))

    @property
    def REDIS_HOST(self) -> str:
        return os.getenv("REDIS_HOST", self._config["redis"]["host"])

    @property
    def REDIS_PORT(self) -> int:
        return int(os.getenv("REDIS_PORT", self._config["redis"]["port"]))

    @property
    def REDIS_DB(self) -> int:
        return int(os.getenv("REDIS_DB", self._config["redis"]["database"]))

    @property
    def REDIS_PASSWORD(self) -> Optional[str]:
        return os.getenv("REDIS_PASSWORD", self._config["redis"]["password"])

    # ==================== JWT 认证配置 ====================
    @property
    def JWT_SECRET_KEY(self) -> str:
        return os.getenv("JWT_SECRET_KEY", self._config["jwt"]["secret_key"])

    @property
    def JWT_ALGORITHM(self) -> str:
        return os.getenv("JWT_ALGORITHM", self._config["jwt"]["algorithm"])

    @property
    def JWT_EXPIRE_MINUTES(self) -> int:
        return int(os.getenv("JWT_EXPIRE_MINUTES", self._config["jwt"]["expire_minutes"]))

    # ==================== CORS 配置 ====================
    @property
    def CORS_ORIGINS(self) -> List[str]:
        env_origins = os.getenv("CORS_ORIGINS")
        if env_origins:
            return [origin.strip() for origin in env_origins.split(",")]
        return self._config["cors"]["origins"]

    # ==================== 业务规则配置 ====================
    @property
    def COMMENT_MAX_LENGTH(self) -> int:
        return int(os.getenv("COMMENT_MAX_LENGTH", self._config["business"]["comment_max_length"]))

    @property
    def POST_MAX_LENGTH(self) -> int:
        return int(os.getenv("POST_MAX_LENGTH", self._config["business"]["post_max_length"]))

    @property
    def RELATIONSHIP_CACHE_TTL(self) -> int:
        return int(os.getenv("RELATIONSHIP_CACHE_TTL", self._config["business"]["relationship_cache_ttl"]))

    @property
    def DEFAULT_PAGE_SIZE(self) -> int:
        return int(os.getenv("DEFAULT_PAGE_SIZE", self._config["business"]["default_page_size"]))

    @property
    def MAX_PAGE_SIZE(self) -> int:
        return int(os.getenv("MAX_PAGE_SIZE", self._config["business"]["max_page_size"]))


# 全局配置实例
settings = Settings()
