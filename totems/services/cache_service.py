import redis
import json
import structlog
from typing import List, Optional, Any

from totems.config import settings

logger = structlog.get_logger()


class CacheService:
    def __init__(self, redis_url: str = None, ttl: int = None):
        self.ttl = ttl if ttl is not None else settings.CACHE_TTL
        self.redis_client = redis.Redis.from_url(redis_url or settings.REDIS_URL, decode_responses=True)

    def get(self, key: str) -> Optional[Any]:
        """Get cached value"""
        try:
            cached = self.redis_client.get(key)
            if cached:
                return json.loads(cached)
        except Exception as e:
            logger.error("Cache get failed", key=key, error=str(e))
        return None

    def set(self, key: str, value: Any, ttl: int = None) -> bool:
        """Set cached value with TTL"""
        try:
            return bool(self.redis_client.setex(key, ttl or self.ttl, json.dumps(value, default=str)))
        except Exception as e:
            logger.error("Cache set failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        """Delete cached value"""
        try:
            return bool(self.redis_client.delete(key))
        except Exception as e:
            logger.error("Cache delete failed", key=key, error=str(e))
            return False

    def generate_key(self, prefix: str, *args) -> str:
        """Generate cache key"""
        return f"{prefix}:{'_'.join(str(arg) for arg in args)}"


def totem_cache_keys(cache: CacheService, ticker: str) -> List[str]:
    """Every cached read that a mutation of the ticker makes stale"""
    return [
        cache.generate_key("totem", ticker),
        cache.generate_key("stats", ticker),
        cache.generate_key("relays", ticker),
    ]
