"""State models kept by download trackers."""

from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(Enum):
    """Tracked task states.

    Flow: QUEUED -> IN_FLIGHT -> (SUCCEEDED | FAILED), or CANCELLED from
    either of the first two.
    """

    QUEUED = "queued"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELLED}
)


class TaskInfo(BaseModel):
    """Tracked state of one fetch task."""

    task_id: str = Field(description="Unique identifier of the task")
    target_id: str = Field(description="Resource the fetch is for")
    url: str = Field(default="", description="Resolved fetch URL")
    status: TaskStatus = Field(
        default=TaskStatus.QUEUED, description="Current status of the task"
    )
    status_code: int | None = Field(
        default=None, ge=0, description="HTTP status once settled"
    )
    payload_bytes: int = Field(default=0, ge=0, description="Size of the payload")
    error: str | None = Field(
        default=None, description="Error text if the fetch failed in transit"
    )

    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


class TaskStats(BaseModel):
    """Aggregate statistics about tracked tasks."""

    total: int = Field(default=0, ge=0, description="Tasks tracked")
    queued: int = Field(default=0, ge=0, description="Tasks waiting for a slot")
    in_flight: int = Field(default=0, ge=0, description="Tasks with a live request")
    succeeded: int = Field(default=0, ge=0, description="Tasks that returned 200")
    failed: int = Field(default=0, ge=0, description="Tasks that failed")
    cancelled: int = Field(default=0, ge=0, description="Tasks discarded by clear()")
    rejected: int = Field(
        default=0, ge=0, description="Submissions dropped for lack of a URL"
    )
    succeeded_bytes: int = Field(
        default=0, ge=0, description="Total payload bytes of successful fetches"
    )
