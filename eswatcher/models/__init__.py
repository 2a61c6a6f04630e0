"""Core data structures for eswatcher."""

from eswatcher.models.config import (
    LogConfig,
    PollConfig,
    ResourceConfig,
    TailConfig,
    WatcherConfig,
)
from eswatcher.models.resources import (
    Condition,
    ObservedEvent,
    PollOutcome,
    ResourceReference,
)

__all__ = [
    "Condition",
    "LogConfig",
    "ObservedEvent",
    "PollConfig",
    "PollOutcome",
    "ResourceConfig",
    "ResourceReference",
    "TailConfig",
    "WatcherConfig",
]
