"""
Redis Caching Service

This module caches rewritten documents in Redis so that pages rendered
repeatedly by the publishing pipeline are only rewritten once. The cache
is optional: when Redis is disabled or unreachable every lookup is a miss
and rewriting proceeds normally.
"""

import json
import hashlib
import time
from collections import deque
from datetime import datetime
from typing import Optional, Dict, Any

from redis.client import Redis
from redis.connection import ConnectionPool
from redis.exceptions import RedisError

from image_proxy.config import Config
from image_proxy.models.proxy_config import ProxyConfig, RewriteResult
from image_proxy.utils.helpers import get_logger

# Set up cache-specific logger
cache_logger = get_logger('rewrite_cache')

KEY_PREFIX = "rewrite"

# Lookup times kept for the average; older samples are dropped
MAX_RESPONSE_SAMPLES = 1000


class CacheMetrics:
    """
    Cache performance monitoring.

    Tracks hits, misses and lookup times for the rewrite cache.
    """

    def __init__(self):
        self._hits = 0
        self._misses = 0
        self._response_times = deque(maxlen=MAX_RESPONSE_SAMPLES)
        self._start_time = datetime.now()

    def track_hit(self, response_time: float):
        """
        Track a cache hit event.

        Args:
            response_time: Lookup time in milliseconds
        """
        self._hits += 1
        self._response_times.append(response_time)
        cache_logger.debug(
            f"CACHE HIT - rewrite: {response_time:.2f}ms response time. "
            f"Total hits: {self._hits}"
        )

    def track_miss(self, response_time: float):
        """
        Track a cache miss event.

        Args:
            response_time: Lookup time in milliseconds
        """
        self._misses += 1
        self._response_times.append(response_time)
        cache_logger.debug(
            f"CACHE MISS - rewrite: {response_time:.2f}ms response time. "
            f"Total misses: {self._misses}"
        )

    def get_hit_rate(self) -> float:
        total = self._hits + self._misses
        return self._hits / total if total > 0 else 0.0

    def get_avg_response_time(self) -> float:
        times = self._response_times
        return sum(times) / len(times) if times else 0.0

    def get_performance_stats(self) -> Dict[str, Any]:
        """
        Get performance statistics.

        Returns:
            Dict with hit rate, average lookup time, totals and uptime
        """
        return {
            "hit_rate": round(self.get_hit_rate(), 3),
            "avg_response_time_ms": round(self.get_avg_response_time(), 2),
            "total_hits": self._hits,
            "total_misses": self._misses,
            "uptime_seconds": (datetime.now() - self._start_time).total_seconds(),
        }


class RewriteCache:
    """
    Redis cache of rewritten documents.

    Keys combine a fingerprint of the proxy configuration with a hash of the
    source document, so a configuration change never serves stale output.
    """

    def __init__(self, proxy_config: ProxyConfig, config_class=Config):
        """
        Initialize the cache.

        Args:
            proxy_config: Active proxy configuration snapshot
            config_class: Configuration class providing the Redis settings
        """
        self.config_class = config_class
        self.ttl = getattr(config_class, "REWRITE_CACHE_TTL", 86400)
        self.max_document_bytes = getattr(config_class, "MAX_CACHEABLE_DOCUMENT_KB", 512) * 1024
        fingerprint_data = proxy_config.to_stats()
        fingerprint_data["domain_match"] = proxy_config.domain_match
        self.fingerprint = self._generate_hash(fingerprint_data)
        self.metrics = CacheMetrics()
        self.redis_client = self._init_redis() if getattr(config_class, "REDIS_ENABLED", False) else None

        if self.is_available():
            cache_logger.info("Rewrite cache initialized with Redis connection")
        else:
            cache_logger.info("Rewrite cache disabled - documents are rewritten on every request")

    def _init_redis(self) -> Optional[Redis]:
        """
        Initialize Redis connection pool and client.

        Returns:
            Redis client instance, or None when the connection fails
        """
        config = self.config_class
        try:
            redis_url = getattr(config, "REDIS_URL", None)
            max_connections = getattr(config, "REDIS_MAX_CONNECTIONS", 20)

            if not redis_url:
                host = getattr(config, "REDIS_HOST", "localhost")
                port = getattr(config, "REDIS_PORT", 6379)
                db = getattr(config, "REDIS_DB", 0)

                cache_logger.info(f"Connecting to Redis at {host}:{port} (DB: {db})")
                pool = ConnectionPool(
                    host=host,
                    port=port,
                    password=getattr(config, "REDIS_PASSWORD", None),
                    db=db,
                    decode_responses=True,
                    max_connections=max_connections
                )
            else:
                cache_logger.info("Connecting to Redis URL")
                pool = ConnectionPool.from_url(
                    redis_url,
                    decode_responses=True,
                    max_connections=max_connections
                )

            client = Redis(connection_pool=pool)
            client.ping()
            cache_logger.info("Redis connection established successfully")
            return client

        except Exception as e:
            cache_logger.error(f"Failed to initialize Redis connection: {e}")
            return None

    def _generate_hash(self, data: Any) -> str:
        """
        Generate a hash for cache keys.

        Args:
            data: String or dict to hash

        Returns:
            Hexadecimal MD5 digest
        """
        if isinstance(data, dict):
            data = json.dumps(data, sort_keys=True)
        elif not isinstance(data, str):
            data = str(data)

        return hashlib.md5(data.encode('utf-8')).hexdigest()

    def _make_key(self, html: str) -> str:
        return f"{KEY_PREFIX}:{self.fingerprint[:8]}:{self._generate_hash(html)}"

    def is_available(self) -> bool:
        """Check whether Redis is connected."""
        return self.redis_client is not None

    def get(self, html: str) -> Optional[RewriteResult]:
        """
        Look up the rewritten form of a document.

        Args:
            html: Source document

        Returns:
            RewriteResult on a hit, None on a miss or when Redis is unavailable
        """
        if not self.is_available():
            return None

        start_time = time.time()
        try:
            cached = self.redis_client.get(self._make_key(html))
        except RedisError as e:
            cache_logger.warning(f"Rewrite cache lookup failed: {e}")
            return None

        response_time = (time.time() - start_time) * 1000
        if cached is None:
            self.metrics.track_miss(response_time)
            return None

        try:
            data = json.loads(cached)
            result = RewriteResult(text=data["text"], proxied_count=int(data["proxied_count"]))
        except (ValueError, KeyError, TypeError) as e:
            cache_logger.warning(f"Ignoring unreadable rewrite cache entry: {e}")
            self.metrics.track_miss(response_time)
            return None

        self.metrics.track_hit(response_time)
        return result

    def set(self, html: str, result: RewriteResult) -> bool:
        """
        Store the rewritten form of a document.

        Args:
            html: Source document
            result: Rewrite result for that document

        Returns:
            bool: True when the entry was written
        """
        if not self.is_available():
            return False

        if len(html.encode('utf-8')) > self.max_document_bytes:
            cache_logger.debug(f"Document of {len(html)} chars exceeds cache size limit, not cached")
            return False

        payload = json.dumps({
            "text": result.text,
            "proxied_count": result.proxied_count,
            "cached_at": datetime.now().isoformat(),
        })
        try:
            return bool(self.redis_client.setex(self._make_key(html), self.ttl, payload))
        except RedisError as e:
            cache_logger.warning(f"Rewrite cache store failed: {e}")
            return False

    def invalidate(self) -> int:
        """
        Delete every cached document.

        Returns:
            int: Number of deleted keys
        """
        if not self.is_available():
            return 0

        try:
            keys = list(self.redis_client.scan_iter(match=f"{KEY_PREFIX}:*"))
            deleted = self.redis_client.delete(*keys) if keys else 0
        except RedisError as e:
            cache_logger.warning(f"Rewrite cache invalidation failed: {e}")
            return 0

        cache_logger.info(f"Invalidated {deleted} cached documents")
        return deleted

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with availability, settings and performance metrics
        """
        return {
            "available": self.is_available(),
            "ttl_seconds": self.ttl,
            "max_document_kb": self.max_document_bytes // 1024,
            "performance": self.metrics.get_performance_stats(),
        }
