"""Realtime notification feed over Redis pub/sub.

Each recipient has its own channel (``{prefix}:{user_id}``) carrying
change events shaped like the database's logical replication payload::

    {"type": "INSERT", "table": "notifications", "record": {...row...}}

Only INSERT events for the notifications table are delivered to handlers,
in the order Redis delivers them.
"""

import asyncio
import contextlib
import json
from typing import Any

from redis.asyncio import Redis
from redis.asyncio.client import PubSub

from src.taskboard.core.config import get_settings
from src.taskboard.core.logging import get_logger
from src.taskboard.core.redis import get_redis
from src.taskboard.gateway.protocols import NotificationHandler, Row, Table

logger = get_logger(__name__)

INSERT_EVENT = "INSERT"


def _parse_event(data: Any) -> Row | None:
    """Return the inserted notification row, or None for anything else."""
    try:
        event = json.loads(data)
    except (TypeError, ValueError):
        logger.warning("Dropping undecodable realtime message")
        return None
    if not isinstance(event, dict):
        return None
    if event.get("type") != INSERT_EVENT or event.get("table") != Table.NOTIFICATIONS.value:
        return None
    record = event.get("record")
    return record if isinstance(record, dict) else None


class RedisSubscription:
    """Handle for one live channel subscription."""

    def __init__(self, pubsub: PubSub, task: asyncio.Task[None], channel: str):
        self._pubsub = pubsub
        self._task = task
        self.channel = channel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        await self._pubsub.unsubscribe(self.channel)
        await self._pubsub.aclose()
        logger.debug("Realtime subscription closed", channel=self.channel)


class RedisNotificationFeed:
    """NotificationFeed backed by Redis pub/sub."""

    def __init__(
        self,
        redis: Redis,
        *,
        channel_prefix: str = "notifications",
        poll_interval: float = 1.0,
    ):
        self.redis = redis
        self.channel_prefix = channel_prefix
        self.poll_interval = poll_interval

    def channel_for(self, user_id: str) -> str:
        return f"{self.channel_prefix}:{user_id}"

    async def subscribe(self, user_id: str, handler: NotificationHandler) -> RedisSubscription:
        channel = self.channel_for(user_id)
        pubsub = self.redis.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe(channel)
        task = asyncio.create_task(self._listen(pubsub, handler, channel))
        logger.debug("Realtime subscription opened", channel=channel)
        return RedisSubscription(pubsub, task, channel)

    async def _listen(self, pubsub: PubSub, handler: NotificationHandler, channel: str) -> None:
        while True:
            message = await pubsub.get_message(
                ignore_subscribe_messages=True, timeout=self.poll_interval
            )
            if message is None or message.get("type") != "message":
                continue
            row = _parse_event(message.get("data"))
            if row is None:
                continue
            try:
                await handler(row)
            except Exception:
                # One bad event must not end the subscription
                logger.exception("Realtime handler failed", channel=channel)

    async def publish_insert(self, row: Row) -> int:
        """Publish a notification insert to its recipient's channel.

        Returns:
            Number of subscribers that received the event
        """
        event = {"type": INSERT_EVENT, "table": Table.NOTIFICATIONS.value, "record": row}
        return await self.redis.publish(
            self.channel_for(str(row["user_id"])), json.dumps(event, default=str)
        )


async def build_notification_feed() -> RedisNotificationFeed | None:
    """Feed on the shared Redis client, or None when Redis is unavailable."""
    redis = await get_redis()
    if redis is None:
        return None
    settings = get_settings()
    return RedisNotificationFeed(
        redis,
        channel_prefix=settings.realtime_channel_prefix,
        poll_interval=settings.realtime_poll_interval_seconds,
    )
