"""
Subscriber Store Module
Narrow key-value interface over the hosted store (Vercel KV / Redis)
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol, Union

import redis

from app.errors import StoreFailure

logger = logging.getLogger(__name__)

FieldValue = Union[int, str]


class SubscriberStoreProtocol(Protocol):
    backend: str

    def set_field(self, collection: str, field: str, value: FieldValue) -> None:
        ...


class RedisSubscriberStore:
    """Store subscribers as fields of a Redis hash"""

    backend = "redis"

    def __init__(self, url: str = "", client: Optional[redis.Redis] = None):
        """
        Initialize the Redis-backed store

        Args:
            url: Connection URL, e.g. the KV_URL Vercel injects (rediss://...)
            client: Already-built client; takes precedence over url
        """
        if client is None:
            if not url:
                raise ValueError("A Redis URL or client is required")
            client = redis.from_url(
                url,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        self.client = client

    def set_field(self, collection: str, field: str, value: FieldValue) -> None:
        """
        Write one field of a hash, overwriting any previous value

        Raises:
            StoreFailure: If the write fails for any reason
        """
        try:
            self.client.hset(collection, mapping={field: value})
        except (redis.RedisError, OSError) as e:
            raise StoreFailure(f"HSET {collection} failed: {e}") from e


class InMemorySubscriberStore:
    """Simple in-memory store for local development and tests."""

    backend = "memory"

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, FieldValue]] = {}

    def set_field(self, collection: str, field: str, value: FieldValue) -> None:
        self.collections.setdefault(collection, {})[field] = value

    def get_field(self, collection: str, field: str) -> Optional[FieldValue]:
        return self.collections.get(collection, {}).get(field)

    def fields(self, collection: str) -> Dict[str, FieldValue]:
        return dict(self.collections.get(collection, {}))


def build_store(url: str = "") -> SubscriberStoreProtocol:
    """Return a Redis store when a URL is configured, otherwise an in-memory one."""
    if url:
        return RedisSubscriberStore(url)

    logger.warning("No KV_URL configured; subscribers are kept in memory only")
    return InMemorySubscriberStore()
