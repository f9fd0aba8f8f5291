"""Abstract base class for event emitters."""

import typing as t
from abc import ABC, abstractmethod

if t.TYPE_CHECKING:
    from .subscription import Subscription

EventHandler = t.Callable[[t.Any], t.Awaitable[None] | None]


class BaseEmitter(ABC):
    """Abstract base class for event emitters."""

    @abstractmethod
    def on(self, event_type: str, handler: EventHandler) -> "Subscription":
        """Subscribe to events."""
        pass

    @abstractmethod
    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe from events."""
        pass

    @abstractmethod
    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Emit an event."""
        pass
