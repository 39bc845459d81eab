"""
Redis Connection Manager
Connection pool for the rq compositor transport.
"""

import logging
from typing import Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, TimeoutError

logger = logging.getLogger(__name__)


class RedisManager:
    """
    Lazily creates a pooled Redis client for one URL.

    One instance lives on the application context; nothing connects
    until the first get_connection() call.
    """

    def __init__(self, url: str):
        self.url = url
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None

    def _create_pool(self) -> ConnectionPool:
        return ConnectionPool.from_url(
            self.url,
            max_connections=10,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            decode_responses=False  # RQ needs bytes
        )

    def get_connection(self) -> Redis:
        if self._pool is None:
            self._pool = self._create_pool()
            logger.info(f"Created Redis connection pool for {self.masked_url}")

        if self._client is None:
            self._client = Redis(connection_pool=self._pool)

        return self._client

    def health_check(self) -> dict:
        try:
            client = self.get_connection()
            ping_result = client.ping()
            info = client.info("server")

            return {
                "status": "healthy" if ping_result else "unhealthy",
                "connected": True,
                "redis_version": info.get("redis_version", "unknown"),
                "url": self.masked_url
            }
        except (ConnectionError, TimeoutError) as e:
            logger.error(f"Redis health check failed: {e}")
            return {
                "status": "unhealthy",
                "connected": False,
                "error": str(e),
                "url": self.masked_url
            }

    @property
    def masked_url(self) -> str:
        """URL with the password hidden, for logging."""
        if "@" in self.url:
            # redis://:password@host:port -> redis://***@host:port
            return f"redis://***@{self.url.split('@')[-1]}"
        return self.url

    def close(self):
        if self._pool:
            self._pool.disconnect()
            self._pool = None
            self._client = None
            logger.info("Redis connection pool closed")
