"""Database module - MongoDB and Redis connections."""

from app.db.mongodb import get_mongodb
from app.db.redis import collection_lock, get_redis, refresh_lock

__all__ = [
    "get_mongodb",
    "collection_lock",
    "get_redis",
    "refresh_lock",
]
