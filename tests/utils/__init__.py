"""Test utilities package."""

from tests.utils.gateway import (
    InMemoryFeed,
    InMemoryGateway,
    InMemorySubscription,
    RecordingProvisioner,
)

__all__ = [
    "InMemoryFeed",
    "InMemoryGateway",
    "InMemorySubscription",
    "RecordingProvisioner",
]
