"""Custom exceptions for fetchq.

Per-task fetch failures are never raised; they reach callers as FetchFailed
outcomes. The exceptions here signal misuse of the library.
"""


class FetchQueueError(Exception):
    """Base exception for fetchq errors."""

    pass


class ClientNotInitialisedError(FetchQueueError):
    """Raised when a fetcher is used before its HTTP session exists.

    This typically occurs when issuing requests without entering the
    fetcher's context manager, calling open(), or providing a session.
    """

    pass


class QueueError(FetchQueueError):
    """Base exception for queue-related errors."""

    pass


class InvalidCeilingError(QueueError, ValueError):
    """Raised when a queue is constructed with a ceiling below one."""

    def __init__(self, ceiling: int) -> None:
        self.ceiling = ceiling
        super().__init__(f"Concurrency ceiling must be at least 1, got {ceiling}")
