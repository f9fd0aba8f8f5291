"""Handle returned by emitter subscriptions."""

import typing as t

if t.TYPE_CHECKING:
    from .base import BaseEmitter, EventHandler


class Subscription:
    """Ties a handler to the emitter it was registered with.

    Lets callers unsubscribe without keeping the event type and handler
    around themselves.
    """

    def __init__(
        self, emitter: "BaseEmitter", event_type: str, handler: "EventHandler"
    ) -> None:
        self._emitter = emitter
        self._event_type = event_type
        self._handler = handler
        self._active = True

    @property
    def is_active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Remove the handler. Idempotent."""
        if not self._active:
            return
        self._emitter.off(self._event_type, self._handler)
        self._active = False
