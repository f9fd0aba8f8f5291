"""In-process event emitter with sync and async handler support."""

import asyncio
import typing as t

from ..infrastructure.logging import get_logger
from .base import BaseEmitter, EventHandler
from .subscription import Subscription

if t.TYPE_CHECKING:
    import loguru

WILDCARD = "*"


class EventEmitter(BaseEmitter):
    """Dispatches events to handlers registered per event type.

    Handlers may be plain functions or coroutine functions. Handlers
    subscribed to "*" receive every event. A failing handler is logged and
    never stops delivery to the others or reaches the emitting code.

    Usage:
        emitter = EventEmitter()
        sub = emitter.on("task.settled", lambda e: print(e.success))
        await emitter.emit("task.settled", event)
        sub.unsubscribe()
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._logger = logger

    def on(self, event_type: str, handler: EventHandler) -> Subscription:
        """Subscribe a handler to an event type (or "*" for all events).

        Returns:
            Subscription that can be used to remove the handler again.
        """
        self._handlers.setdefault(event_type, []).append(handler)
        return Subscription(self, event_type, handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Unsubscribe a handler. Unknown handlers are logged and ignored."""
        try:
            self._handlers[event_type].remove(handler)
        except (KeyError, ValueError):
            self._logger.warning(
                f"Handler {handler} not found for event {event_type}"
            )

    async def emit(self, event_type: str, event_data: t.Any) -> None:
        """Deliver an event to every subscribed handler.

        Sync handlers run in subscription order; coroutines they return are
        gathered afterwards.
        """
        handlers = list(self._handlers.get(event_type, []))
        if event_type != WILDCARD:
            handlers.extend(self._handlers.get(WILDCARD, []))

        pending: list[t.Awaitable[None]] = []
        for handler in handlers:
            try:
                result = handler(event_data)
            except Exception:
                self._logger.exception(f"Error in event handler for {event_type}")
                continue
            if asyncio.iscoroutine(result):
                pending.append(result)

        if not pending:
            return

        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                self._logger.opt(
                    exception=(type(result), result, result.__traceback__)
                ).error(f"Error in async event handler for {event_type}")
