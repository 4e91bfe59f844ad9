from src.taskboard.realtime.feed import (
    RedisNotificationFeed,
    RedisSubscription,
    build_notification_feed,
)

__all__ = [
    "RedisNotificationFeed",
    "RedisSubscription",
    "build_notification_feed",
]
