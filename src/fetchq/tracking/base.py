"""Abstract base class for task trackers."""

from abc import ABC, abstractmethod

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


class BaseTracker(ABC):
    """Abstract base class for task trackers.

    Trackers observe a queue through its emitter. attach() wires the
    tracker's handlers to the queue's lifecycle events.
    """

    def attach(self, emitter: BaseEmitter) -> list[Subscription]:
        """Subscribe this tracker to a queue's emitter."""
        return [
            emitter.on("task.queued", self._track_queued),
            emitter.on("task.started", self._track_started),
            emitter.on("task.settled", self._track_settled),
            emitter.on("task.cancelled", self._track_cancelled),
            emitter.on("task.rejected", self._track_rejected),
        ]

    @abstractmethod
    def get_task_info(self, task_id: str) -> TaskInfo | None:
        """Get current state of a task, or None if unknown."""
        pass

    @abstractmethod
    def get_target_tasks(self, target_id: str) -> list[TaskInfo]:
        """Get every tracked task for a target, oldest first."""
        pass

    @abstractmethod
    def get_stats(self) -> TaskStats:
        """Get aggregate statistics."""
        pass

    @abstractmethod
    async def _track_queued(self, event: TaskQueuedEvent) -> None:
        pass

    @abstractmethod
    async def _track_started(self, event: TaskStartedEvent) -> None:
        pass

    @abstractmethod
    async def _track_settled(self, event: TaskSettledEvent) -> None:
        pass

    @abstractmethod
    async def _track_cancelled(self, event: TaskCancelledEvent) -> None:
        pass

    @abstractmethod
    async def _track_rejected(self, event: TaskRejectedEvent) -> None:
        pass
