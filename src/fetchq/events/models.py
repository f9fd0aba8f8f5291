"""Events emitted by DownloadTaskQueue during a task's lifecycle."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseEvent(BaseModel):
    """Base class for all events. Immutable, timestamped in UTC."""

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(
        default_factory=_utc_now, description="When the event happened (UTC)"
    )
    event_type: str = Field(default="base", description="Event type identifier")


class TaskEvent(BaseEvent):
    """Base class for task lifecycle events.

    All task events carry the task id and the target the fetch is for.
    """

    task_id: str = Field(description="Unique identifier of the task")
    target_id: str = Field(description="Resource the fetch is for")
    url: str = Field(default="", description="Resolved fetch URL")
    event_type: str = Field(default="task.base")


class TaskQueuedEvent(TaskEvent):
    """Emitted when a task waits for a free slot."""

    event_type: str = Field(default="task.queued")
    position: int = Field(ge=0, description="Index in the pending sequence")


class TaskStartedEvent(TaskEvent):
    """Emitted when a task's request is issued."""

    event_type: str = Field(default="task.started")
    in_flight: int = Field(ge=1, description="In-flight count including this task")


class TaskSettledEvent(TaskEvent):
    """Emitted after a task's completion callback has run."""

    event_type: str = Field(default="task.settled")
    success: bool = Field(description="True for HTTP 200")
    status_code: int = Field(ge=0, description="HTTP status, 0 for transport errors")
    payload_bytes: int = Field(default=0, ge=0, description="Size of the payload")
    error: str | None = Field(default=None, description="Transport error text")


class TaskCancelledEvent(TaskEvent):
    """Emitted for each task discarded by clear()."""

    event_type: str = Field(default="task.cancelled")
    was_in_flight: bool = Field(description="False if the task was still pending")


class TaskRejectedEvent(BaseEvent):
    """Emitted when a submission has no URL and is dropped before admission."""

    event_type: str = Field(default="task.rejected")
    target_id: str = Field(description="Resource the fetch was for")
    reason: str = Field(default="missing url", description="Why it was dropped")
