"""Core domain models for queued fetches."""

import typing as t
import uuid
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

HTTP_OK = 200
TRANSPORT_FAILURE_STATUS = 0


class TaskState(Enum):
    """Fetch task lifecycle states.

    Flow: CREATED -> PENDING -> IN_FLIGHT -> SETTLED, with CANCELLED
    reachable from PENDING or IN_FLIGHT. A task never moves backwards.
    """

    CREATED = "created"
    PENDING = "pending"  # Waiting for a free slot
    IN_FLIGHT = "in_flight"  # Request issued
    SETTLED = "settled"  # Outcome delivered
    CANCELLED = "cancelled"  # Discarded by clear()


class FetchSucceeded(BaseModel):
    """Outcome of a fetch that returned HTTP 200."""

    model_config = ConfigDict(frozen=True)

    success: t.Literal[True] = True
    payload: bytes = Field(description="Response body")


class FetchFailed(BaseModel):
    """Outcome of a fetch that returned any other status or failed in transit."""

    model_config = ConfigDict(frozen=True)

    success: t.Literal[False] = False
    status_code: int = Field(
        ge=0, description="HTTP status, or 0 when no response arrived"
    )
    error: str | None = Field(default=None, description="Transport error text")


FetchOutcome = FetchSucceeded | FetchFailed

CompletionCallback = t.Callable[[FetchOutcome], t.Awaitable[None] | None]


def outcome_from_response(
    status_code: int, payload: bytes | None, error: str | None = None
) -> FetchOutcome:
    """Map a raw settlement onto an outcome.

    Only status 200 counts as success. A 200 without a body is treated as
    an empty payload.
    """
    if status_code == HTTP_OK:
        return FetchSucceeded(payload=payload or b"")
    return FetchFailed(status_code=status_code, error=error)


@dataclass(eq=False)
class DownloadTask:
    """One outstanding or queued fetch.

    Tasks compare by identity; the same target may be fetched by several
    tasks at once.
    """

    target_id: str
    url: str
    on_complete: CompletionCallback
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    state: TaskState = TaskState.CREATED
    request_handle: t.Any = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (TaskState.SETTLED, TaskState.CANCELLED)
