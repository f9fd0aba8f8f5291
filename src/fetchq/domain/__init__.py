"""Domain models - tasks, outcomes, URL rules and exceptions."""

from .exceptions import (
    ClientNotInitialisedError,
    FetchQueueError,
    InvalidCeilingError,
    QueueError,
)
from .tasks import (
    HTTP_OK,
    TRANSPORT_FAILURE_STATUS,
    CompletionCallback,
    DownloadTask,
    FetchFailed,
    FetchOutcome,
    FetchSucceeded,
    TaskState,
    outcome_from_response,
)
from .urls import resolve_url

__all__ = [
    # Tasks
    "DownloadTask",
    "TaskState",
    "CompletionCallback",
    # Outcomes
    "FetchOutcome",
    "FetchSucceeded",
    "FetchFailed",
    "outcome_from_response",
    "HTTP_OK",
    "TRANSPORT_FAILURE_STATUS",
    # URLs
    "resolve_url",
    # Exceptions
    "FetchQueueError",
    "ClientNotInitialisedError",
    "QueueError",
    "InvalidCeilingError",
]
