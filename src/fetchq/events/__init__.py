"""Event infrastructure - event emitter and event types."""

from .base import BaseEmitter, EventHandler
from .emitter import EventEmitter
from .models import (
    BaseEvent,
    TaskCancelledEvent,
    TaskEvent,
    TaskQueuedEvent,
    TaskRejectedEvent,
    TaskSettledEvent,
    TaskStartedEvent,
)
from .null import NullEmitter
from .subscription import Subscription

__all__ = [
    # Base and implementations
    "BaseEmitter",
    "EventHandler",
    "EventEmitter",
    "NullEmitter",
    "Subscription",
    # Events
    "BaseEvent",
    "TaskEvent",
    "TaskQueuedEvent",
    "TaskStartedEvent",
    "TaskSettledEvent",
    "TaskCancelledEvent",
    "TaskRejectedEvent",
]
