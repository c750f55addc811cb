"""Key-value cache backends for the featured products snapshot.

:class:`RedisCache` is used when ``REDIS_URL`` is set; otherwise the service
falls back to :class:`InMemoryCache` so it can run without a Redis instance.
Both store plain strings and apply no TTL.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis

# Configure module logger
logger = logging.getLogger(__name__)


class CacheBackend(ABC):
    """Contract of the string key-value cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value under ``key``, or None when absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key`` with no expiry."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""

    def ping(self) -> bool:
        """Check that the cache is reachable."""
        return True


class RedisCache(CacheBackend):
    """Redis-backed string cache."""

    def __init__(self, url: str) -> None:
        self._client = redis.from_url(url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False


class InMemoryCache(CacheBackend):
    """Process-local string cache with the same interface as RedisCache."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()
