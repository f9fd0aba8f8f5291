"""Abstract fetch capability the task queue depends on."""

import typing as t
from abc import ABC, abstractmethod

# Receives (status_code, payload, error). payload is None unless the status
# is 200; error carries transport failure text when no response arrived.
SettlementCallback = t.Callable[[int, bytes | None, str | None], t.Awaitable[None]]


class BaseFetcher(ABC):
    """Issues and cancels network fetches.

    Implementations must deliver exactly one settlement per issued request
    unless it is cancelled first, and must never block in issue().
    """

    @abstractmethod
    def issue(self, url: str, on_settled: SettlementCallback) -> t.Hashable:
        """Start fetching url and return an opaque handle for cancellation."""
        pass

    @abstractmethod
    def cancel(self, handle: t.Hashable) -> None:
        """Abort the request behind handle. Safe on finished requests."""
        pass
