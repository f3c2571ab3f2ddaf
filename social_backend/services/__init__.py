"""
业务服务层
"""

from .engagement_store import EngagementStore, engagement_store
from .relationship_query_service import relationship_query_service, RelationshipQueryService
from .relationship_service import relationship_service, RelationshipService
from .engagement_service import engagement_service, EngagementService
from .deletion_service import cascade_deletion_service, CascadeDeletionService
from .post_service import post_service, PostService

__all__ = [
    # 存储
    "EngagementStore",
    # 关系图服务
    "RelationshipService",
    "RelationshipQueryService",
    # 互动服务
    "EngagementService",
    "CascadeDeletionService",
    "PostService",
    # 全局服务实例
    "engagement_store",
    "relationship_service",
    "relationship_query_service",
    "engagement_service",
    "cascade_deletion_service",
    "post_service",
]
