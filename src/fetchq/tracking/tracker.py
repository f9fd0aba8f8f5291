"""Task tracking fed by queue lifecycle events."""

import typing as t

from ..domain.tracking import TaskInfo, TaskStats, TaskStatus
from ..events import (
    TaskCancelledEvent,
    TaskQueuedEvent,
    TaskRejectedEvent,
    TaskSettledEvent,
    TaskStartedEvent,
)
from ..infrastructure.logging import get_logger
from .base import BaseTracker

if t.TYPE_CHECKING:
    import loguru


class DownloadTracker(BaseTracker):
    """Keeps a TaskInfo per task id, updated from queue events.

    Usage:
        tracker = DownloadTracker()
        queue = DownloadTaskQueue(fetcher, emitter=EventEmitter())
        tracker.attach(queue.emitter)

        await queue.submit("plugin-1", url, on_complete)
        await queue.join()
        print(tracker.get_stats())
    """

    def __init__(self, logger: "loguru.Logger" = get_logger(__name__)) -> None:
        self._tasks: dict[str, TaskInfo] = {}
        self._rejected = 0
        self._logger = logger

    def get_task_info(self, task_id: str) -> TaskInfo | None:
        return self._tasks.get(task_id)

    def get_target_tasks(self, target_id: str) -> list[TaskInfo]:
        return [info for info in self._tasks.values() if info.target_id == target_id]

    def get_all_tasks(self) -> dict[str, TaskInfo]:
        """Copy of every tracked task keyed by task id."""
        return dict(self._tasks)

    def get_stats(self) -> TaskStats:
        counts = {status: 0 for status in TaskStatus}
        succeeded_bytes = 0
        for info in self._tasks.values():
            counts[info.status] += 1
            if info.status == TaskStatus.SUCCEEDED:
                succeeded_bytes += info.payload_bytes
        return TaskStats(
            total=len(self._tasks),
            queued=counts[TaskStatus.QUEUED],
            in_flight=counts[TaskStatus.IN_FLIGHT],
            succeeded=counts[TaskStatus.SUCCEEDED],
            failed=counts[TaskStatus.FAILED],
            cancelled=counts[TaskStatus.CANCELLED],
            rejected=self._rejected,
            succeeded_bytes=succeeded_bytes,
        )

    def _get_or_create(
        self, task_id: str, target_id: str, url: str
    ) -> TaskInfo:
        info = self._tasks.get(task_id)
        if info is None:
            info = TaskInfo(task_id=task_id, target_id=target_id, url=url)
            self._tasks[task_id] = info
        return info

    async def _track_queued(self, event: TaskQueuedEvent) -> None:
        self._get_or_create(event.task_id, event.target_id, event.url)
        self._logger.debug(f"Task {event.task_id} queued at {event.position}")

    async def _track_started(self, event: TaskStartedEvent) -> None:
        info = self._get_or_create(event.task_id, event.target_id, event.url)
        if info.is_terminal():
            return
        info.status = TaskStatus.IN_FLIGHT

    async def _track_settled(self, event: TaskSettledEvent) -> None:
        info = self._get_or_create(event.task_id, event.target_id, event.url)
        info.status = TaskStatus.SUCCEEDED if event.success else TaskStatus.FAILED
        info.status_code = event.status_code
        info.payload_bytes = event.payload_bytes
        info.error = event.error
        if not event.success:
            self._logger.debug(
                f"Task {event.task_id} for {event.target_id} failed "
                f"with status {event.status_code}"
            )

    async def _track_cancelled(self, event: TaskCancelledEvent) -> None:
        info = self._get_or_create(event.task_id, event.target_id, event.url)
        info.status = TaskStatus.CANCELLED

    async def _track_rejected(self, event: TaskRejectedEvent) -> None:
        self._rejected += 1
