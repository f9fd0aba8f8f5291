"""Null object implementation of tracker."""

from ..domain.tracking import TaskInfo, TaskStats
from ..events import (
    BaseEmitter,
    Subscription,
    TaskCancelledEvent,
    TaskQueuedEvent,
    TaskRejectedEvent,
    TaskSettledEvent,
    TaskStartedEvent,
)
from .base import BaseTracker


class NullTracker(BaseTracker):
    """Null object implementation of tracker that does nothing.

    Use when tracking is not needed but a tracker interface is required.
    """

    def attach(self, emitter: BaseEmitter) -> list[Subscription]:
        """No-op: subscribes to nothing."""
        return []

    def get_task_info(self, task_id: str) -> TaskInfo | None:
        """No-op: always returns None."""
        return None

    def get_target_tasks(self, target_id: str) -> list[TaskInfo]:
        return []

    def get_stats(self) -> TaskStats:
        return TaskStats()

    async def _track_queued(self, event: TaskQueuedEvent) -> None:
        pass

    async def _track_started(self, event: TaskStartedEvent) -> None:
        pass

    async def _track_settled(self, event: TaskSettledEvent) -> None:
        pass

    async def _track_cancelled(self, event: TaskCancelledEvent) -> None:
        pass

    async def _track_rejected(self, event: TaskRejectedEvent) -> None:
        pass
