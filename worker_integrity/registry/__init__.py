"""
Registry module.
Contains the Redis connection and the worker version registry.
"""

from worker_integrity.registry.client import (
    close_redis,
    create_redis,
    get_redis,
    get_redis_dependency,
    init_redis,
)
from worker_integrity.registry.repository import (
    VersionRegistry,
    role_from_key,
    version_key,
)

__all__ = [
    "create_redis",
    "init_redis",
    "get_redis",
    "get_redis_dependency",
    "close_redis",
    "VersionRegistry",
    "version_key",
    "role_from_key",
]
