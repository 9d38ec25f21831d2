"""Redis Pub/Sub change feed for live store queries.

The Firestore backend publishes the collection paths touched by each commit;
subscribers re-run their query on every notification. Writes made outside
this service (e.g. by the web client) never reach the channel, so a watch
also wakes up every poll interval.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from dataclasses import asdict, dataclass, field
from typing import Any

import redis.asyncio as redis

from propdesk.core.config import Settings, get_settings
from propdesk.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


@dataclass
class StoreChangeEvent:
    """Change notification payload for Redis."""

    collection_path: str
    document_ids: list[str] = field(default_factory=list)
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON publish."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoreChangeEvent:
        """Deserialize from Redis message."""
        return cls(
            collection_path=data["collection_path"],
            document_ids=list(data.get("document_ids") or []),
            timestamp=data.get("timestamp", ""),
        )


async def poll_ticks(interval: float) -> AsyncIterator[None]:
    """Yield immediately, then once every interval seconds."""
    while True:
        yield None
        await asyncio.sleep(interval)


class _RedisChangeFeedBase:
    """Shared Redis connection and channel logic for the store change feed."""

    CHANNEL_PREFIX = "store_changes"

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize. Pass redis_client for DI/testing."""
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection. Call on app startup."""
        if self._connected:
            return
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                )
                await self.redis.ping()
                self._connected = True
                logger.info("Redis change feed connected")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis change feed connection failed: %s", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        if self.redis:
            await self.redis.aclose()
            self._connected = False
            logger.info("Redis change feed disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected."""
        return self._connected and self.redis is not None

    def _get_channel(self, collection_path: str) -> str:
        """Channel name for a collection path."""
        return f"{self.CHANNEL_PREFIX}:{collection_path}"


class StoreChangePublisher(_RedisChangeFeedBase):
    """Publishes commit notifications to per-collection channels."""

    async def publish(self, collection_path: str, document_ids: list[str]) -> bool:
        """Publish a change notification for a collection.

        Returns:
            True if published, False if Redis unavailable or publish failed.
        """
        if not self.is_available() or self.redis is None:
            logger.debug("Redis not available, skipping change publish")
            return False
        try:
            channel = self._get_channel(collection_path)
            event = StoreChangeEvent(
                collection_path=collection_path,
                document_ids=document_ids,
                timestamp=utc_now().isoformat(),
            )
            await self.redis.publish(channel, json.dumps(event.to_dict()))
            logger.debug("Published store change to %s: %s", channel, document_ids)
        except (redis.RedisError, OSError):
            logger.exception("Failed to publish store change")
            return False
        else:
            return True


class StoreChangeSubscriber(_RedisChangeFeedBase):
    """Watches a collection's change channel.

    watch() is reentrant: each call uses its own PubSub, closed in finally.
    """

    async def watch(
        self, collection_path: str, poll_seconds: float
    ) -> AsyncIterator[StoreChangeEvent | None]:
        """Yield once after subscribing, then per notification or poll timeout.

        A None item means "poll tick"; a connection error propagates to the caller.
        """
        if not self.is_available() or self.redis is None:
            logger.info("Redis not available, polling %s every %ss", collection_path, poll_seconds)
            async for tick in poll_ticks(poll_seconds):
                yield tick
            return
        channel = self._get_channel(collection_path)
        pubsub = self.redis.pubsub()
        try:
            await pubsub.subscribe(channel)
            logger.debug("Subscribed to %s", channel)
            yield None
            while True:
                message = await pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=poll_seconds
                )
                if message is None or message.get("type") != "message":
                    yield None
                    continue
                try:
                    yield StoreChangeEvent.from_dict(json.loads(message["data"]))
                except (json.JSONDecodeError, KeyError, TypeError):
                    logger.exception("Failed to parse store change message")
                    yield None
        finally:
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()
            logger.debug("Unsubscribed from %s", channel)
