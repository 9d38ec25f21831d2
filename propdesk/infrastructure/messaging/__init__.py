"""Messaging: live snapshot subscriptions and the Redis change feed."""

from propdesk.infrastructure.messaging.change_feed import (
    StoreChangeEvent,
    StoreChangePublisher,
    StoreChangeSubscriber,
    poll_ticks,
)
from propdesk.infrastructure.messaging.subscription import QueueSubscription

__all__ = [
    "QueueSubscription",
    "StoreChangeEvent",
    "StoreChangePublisher",
    "StoreChangeSubscriber",
    "poll_ticks",
]
