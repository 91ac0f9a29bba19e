# -*- coding: utf-8 -*-
"""
KV Store Module (Redis)

Thin JSON wrapper over redis-py used by RedisStore for category mappings,
the transaction log and the unparsed-email log.
"""

import logging
import json
from typing import Optional, Any, List
from redis import Redis
from expense_tracker.config import REDIS_URL, KV_ENABLED, KV_KEY_PREFIX

logger = logging.getLogger(__name__)


class KVStore:
    """
    KV Store wrapper for Redis operations

    Values are JSON documents. Reads degrade to None/[] when Redis is
    unavailable; writes report failure through their bool return value.
    """

    def __init__(self, client: Optional[Redis] = None, prefix: str = KV_KEY_PREFIX):
        """
        Initialize KV store

        Args:
            client: Redis client instance (if None, will try to create one)
            prefix: Namespace prepended to every key
        """
        self.client = client or get_kv_client()
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from KV store

        Args:
            key: Cache key

        Returns:
            Decoded JSON value or None if not found
        """
        if not self.client:
            return None

        try:
            value = self.client.get(self._key(key))
            if not value:
                return None

            return json.loads(value)

        except Exception as e:
            logger.error(f"Failed to get key {key}: {e}")
            return None

    def set(self, key: str, value: Any) -> bool:
        """
        Set value in KV store

        Args:
            key: Cache key
            value: JSON-serializable value

        Returns:
            bool: True if successful, False otherwise
        """
        if not self.client:
            return False

        try:
            json_value = json.dumps(value, ensure_ascii=False)
            self.client.set(self._key(key), json_value)
            return True

        except Exception as e:
            logger.error(f"Failed to set key {key}: {e}")
            return False

    def append(self, key: str, value: Any) -> bool:
        """Append a JSON value to the list stored at key."""
        if not self.client:
            return False

        try:
            self.client.rpush(self._key(key), json.dumps(value, ensure_ascii=False))
            return True

        except Exception as e:
            logger.error(f"Failed to append to key {key}: {e}")
            return False

    def read_list(self, key: str, raise_errors: bool = False) -> List[Any]:
        """Return every JSON value of the list stored at key, oldest first."""
        if not self.client:
            return []

        try:
            return [json.loads(item) for item in self.client.lrange(self._key(key), 0, -1)]

        except Exception as e:
            logger.error(f"Failed to read list {key}: {e}")
            if raise_errors:
                raise
            return []

    def close(self) -> None:
        if self.client:
            self.client.close()


def get_kv_client() -> Optional[Redis]:
    """
    取得 Redis 客戶端

    Returns:
        Redis 客戶端實例，若 Redis 未啟用則回傳 None
    """
    if not KV_ENABLED:
        logger.warning("Redis not enabled, skipping KV operations")
        return None

    try:
        # REDIS_URL format: redis://... or rediss://...
        client = Redis.from_url(
            REDIS_URL,
            decode_responses=True
        )
        return client
    except Exception as e:
        logger.error(f"Failed to create Redis client: {e}")
        return None
