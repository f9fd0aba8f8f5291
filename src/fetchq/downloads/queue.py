"""Bounded download task queue.

This module provides DownloadTaskQueue, which admits fetch requests, keeps
at most `ceiling` of them in flight and starts waiting requests in FIFO
order as slots free up.
"""

import asyncio
import functools
import inspect
import typing as t
from collections import deque

from ..domain.exceptions import InvalidCeilingError
from ..domain.tasks import (
    HTTP_OK,
    TRANSPORT_FAILURE_STATUS,
    CompletionCallback,
    DownloadTask,
    FetchFailed,
    FetchOutcome,
    TaskState,
    outcome_from_response,
)
from ..events import (
    BaseEmitter,
    BaseEvent,
    NullEmitter,
    TaskCancelledEvent,
    TaskQueuedEvent,
    TaskRejectedEvent,
    TaskSettledEvent,
    TaskStartedEvent,
)
from ..infrastructure.http.base import BaseFetcher
from ..infrastructure.logging import get_logger

if t.TYPE_CHECKING:
    import loguru

DEFAULT_CEILING = 6


class DownloadTaskQueue:
    """Admission-controlled queue of fetch tasks.

    Tasks start immediately while fewer than `ceiling` are in flight and
    otherwise wait at the tail of the pending sequence. Every settlement
    frees a slot, runs the task's completion callback and refills free
    slots from the head of the pending sequence.

    Key features:
    - len(in_flight) never exceeds the ceiling
    - Pending tasks start strictly in submission order
    - Failures free their slot exactly like successes
    - clear() cancels everything; late settlements are ignored
    - Lifecycle events (task.queued, task.started, task.settled,
      task.cancelled, task.rejected) on the injected emitter

    Implementation decisions:
    - All bookkeeping for an operation happens before its first await, so
      a submit, settle or clear is never observed half-applied by another
      coroutine on the same loop. Events are emitted afterwards.
    - On settlement, removal, the completion callback and the refill run
      in one step. An awaitable returned by the callback is awaited after
      the refill so slow consumers never hold a slot. task.started for the
      promoted tasks goes out before that await; task.settled for the
      settled task goes out after it.

    Usage:
        async with AiohttpFetcher() as fetcher:
            queue = DownloadTaskQueue(fetcher, ceiling=6)
            await queue.submit("plugin-1", url, on_complete)
            await queue.join()
    """

    def __init__(
        self,
        fetcher: BaseFetcher,
        ceiling: int = DEFAULT_CEILING,
        logger: t.Optional["loguru.Logger"] = None,
        emitter: BaseEmitter | None = None,
    ) -> None:
        """Initialise the queue.

        Args:
            fetcher: Network capability used to issue and cancel requests.
            ceiling: Maximum number of requests in flight at once.
            logger: Logger for queue events. If None, a module logger is used.
            emitter: Emitter for lifecycle events. If None, a NullEmitter
                    is used (no events emitted).

        Raises:
            InvalidCeilingError: If ceiling is below 1.
        """
        if ceiling < 1:
            raise InvalidCeilingError(ceiling)

        self._fetcher = fetcher
        self._ceiling = ceiling
        self._logger = logger or get_logger(__name__)
        self._emitter = emitter or NullEmitter()
        self._pending: deque[DownloadTask] = deque()
        self._in_flight: dict[str, DownloadTask] = {}
        self._running_callbacks = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def ceiling(self) -> int:
        return self._ceiling

    @property
    def emitter(self) -> BaseEmitter:
        """Event emitter for task lifecycle events."""
        return self._emitter

    @property
    def pending(self) -> tuple[DownloadTask, ...]:
        """Snapshot of waiting tasks in service order."""
        return tuple(self._pending)

    @property
    def in_flight(self) -> tuple[DownloadTask, ...]:
        """Snapshot of tasks whose requests are outstanding."""
        return tuple(self._in_flight.values())

    @property
    def is_idle(self) -> bool:
        """True when nothing is pending, in flight or completing."""
        return self._idle.is_set()

    async def submit(
        self,
        target_id: str,
        url: str | None,
        on_complete: CompletionCallback,
    ) -> DownloadTask | None:
        """Admit a fetch request.

        The request starts at once if a slot is free, otherwise it waits at
        the tail of the pending sequence.

        A request without a URL is dropped: it is never admitted and its
        callback never fires. The drop is logged, emitted as task.rejected
        and signalled to the caller by returning None.

        Args:
            target_id: Resource the fetch is for.
            url: Fully resolved URL.
            on_complete: Receives FetchSucceeded or FetchFailed. May return
                        an awaitable, which the queue awaits.

        Returns:
            The created task, or None if the request was dropped.
        """
        if not url:
            self._logger.warning(f"Dropping fetch for {target_id}: no URL")
            await self._emitter.emit(
                "task.rejected", TaskRejectedEvent(target_id=target_id)
            )
            return None

        task = DownloadTask(target_id=target_id, url=url, on_complete=on_complete)
        self._idle.clear()

        events: list[tuple[str, BaseEvent]] = []
        start_failure: FetchFailed | None = None
        if not self._pending and self._has_free_slot():
            start_failure = self._start(task)
            if start_failure is None:
                events.append(self._started_event(task))
        else:
            task.state = TaskState.PENDING
            self._pending.append(task)
            self._logger.debug(
                f"Queued {task.url} for {target_id} "
                f"({len(self._pending)} pending, {len(self._in_flight)} in flight)"
            )
            events.append(
                (
                    "task.queued",
                    TaskQueuedEvent(
                        task_id=task.id,
                        target_id=task.target_id,
                        url=task.url,
                        position=len(self._pending) - 1,
                    ),
                )
            )

        await self._emit_all(events)
        if start_failure is not None:
            await self._complete([(task, start_failure)])
        self._update_idle()
        return task

    async def settle(
        self,
        task: DownloadTask,
        status_code: int,
        payload: bytes | None,
        error: str | None = None,
    ) -> None:
        """Record the outcome of an in-flight task.

        Called by the fetcher when a request finishes. Status 200 yields
        FetchSucceeded(payload); anything else yields FetchFailed. Either
        way the slot is freed and refilled from the pending head.

        Settlements for tasks that are no longer in flight, because clear()
        removed them, are ignored.
        """
        if self._in_flight.get(task.id) is not task:
            self._logger.debug(f"Ignoring late settlement for {task.url}")
            return

        del self._in_flight[task.id]
        task.state = TaskState.SETTLED
        task.request_handle = None
        outcome = outcome_from_response(status_code, payload, error)
        if outcome.success:
            self._logger.debug(f"Fetched {task.url} for {task.target_id}")
        else:
            self._logger.debug(
                f"Fetch of {task.url} for {task.target_id} failed "
                f"with status {status_code}"
            )

        self._running_callbacks += 1
        try:
            result = self._invoke(task, outcome)
            started_events, start_failures = self._service()
            # Promoted tasks may settle while the callback is awaited
            await self._emit_all(started_events)
            if inspect.isawaitable(result):
                await self._await_callback(task, result)

            await self._emitter.emit(*self._settled_event(task, outcome))
            await self._complete(start_failures)
        finally:
            self._running_callbacks -= 1
            self._update_idle()

    async def clear(self) -> int:
        """Cancel all in-flight requests and discard all pending tasks.

        No completion callbacks fire for cleared tasks. Settlements that
        arrive later for them are ignored.

        Returns:
            Number of tasks cancelled.
        """
        cancelled: list[tuple[DownloadTask, bool]] = []
        for task in self._in_flight.values():
            try:
                self._fetcher.cancel(task.request_handle)
            except Exception:
                self._logger.exception(f"Failed to cancel request for {task.url}")
            task.state = TaskState.CANCELLED
            task.request_handle = None
            cancelled.append((task, True))
        for task in self._pending:
            task.state = TaskState.CANCELLED
            cancelled.append((task, False))
        self._in_flight.clear()
        self._pending.clear()
        self._update_idle()

        if cancelled:
            self._logger.debug(f"Cleared {len(cancelled)} fetch tasks")
        await self._emit_all(
            [
                (
                    "task.cancelled",
                    TaskCancelledEvent(
                        task_id=task.id,
                        target_id=task.target_id,
                        url=task.url,
                        was_in_flight=was_in_flight,
                    ),
                )
                for task, was_in_flight in cancelled
            ]
        )
        return len(cancelled)

    async def join(self, timeout: float | None = None) -> None:
        """Wait until nothing is pending, in flight or completing.

        Raises:
            asyncio.TimeoutError: If timeout is exceeded.
        """
        if timeout:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        else:
            await self._idle.wait()

    def _has_free_slot(self) -> bool:
        return len(self._in_flight) < self._ceiling

    def _start(self, task: DownloadTask) -> FetchFailed | None:
        """Issue the task's request and mark it in flight.

        Returns:
            None on success, or a transport failure if the fetcher refused
            the request. A refused task takes no slot.
        """
        try:
            handle = self._fetcher.issue(
                task.url, functools.partial(self.settle, task)
            )
        except Exception as exc:
            self._logger.error(f"Could not start fetch of {task.url}: {exc}")
            task.state = TaskState.SETTLED
            return FetchFailed(
                status_code=TRANSPORT_FAILURE_STATUS,
                error=f"{type(exc).__name__}: {exc}",
            )

        task.request_handle = handle
        task.state = TaskState.IN_FLIGHT
        self._in_flight[task.id] = task
        self._logger.debug(
            f"Started {task.url} ({len(self._in_flight)}/{self._ceiling} in flight)"
        )
        return None

    def _service(
        self,
    ) -> tuple[list[tuple[str, BaseEvent]], list[tuple[DownloadTask, FetchFailed]]]:
        """Start pending tasks from the head while slots are free."""
        started: list[tuple[str, BaseEvent]] = []
        failures: list[tuple[DownloadTask, FetchFailed]] = []
        while self._pending and self._has_free_slot():
            task = self._pending.popleft()
            failure = self._start(task)
            if failure is None:
                started.append(self._started_event(task))
            else:
                failures.append((task, failure))
        return started, failures

    def _invoke(
        self, task: DownloadTask, outcome: FetchOutcome
    ) -> t.Awaitable[None] | None:
        try:
            return task.on_complete(outcome)
        except Exception:
            self._logger.exception(f"Completion callback failed for {task.url}")
            return None

    async def _await_callback(
        self, task: DownloadTask, result: t.Awaitable[None]
    ) -> None:
        try:
            await result
        except Exception:
            self._logger.exception(f"Completion callback failed for {task.url}")

    async def _complete(self, failures: list[tuple[DownloadTask, FetchFailed]]) -> None:
        """Deliver outcomes for tasks whose requests could not be issued."""
        for task, outcome in failures:
            result = self._invoke(task, outcome)
            if inspect.isawaitable(result):
                await self._await_callback(task, result)
            await self._emitter.emit(*self._settled_event(task, outcome))

    def _update_idle(self) -> None:
        if self._pending or self._in_flight or self._running_callbacks:
            self._idle.clear()
        else:
            self._idle.set()

    async def _emit_all(self, events: list[tuple[str, BaseEvent]]) -> None:
        for event_type, event in events:
            await self._emitter.emit(event_type, event)

    def _started_event(self, task: DownloadTask) -> tuple[str, BaseEvent]:
        return (
            "task.started",
            TaskStartedEvent(
                task_id=task.id,
                target_id=task.target_id,
                url=task.url,
                in_flight=len(self._in_flight),
            ),
        )

    def _settled_event(
        self, task: DownloadTask, outcome: FetchOutcome
    ) -> tuple[str, BaseEvent]:
        if outcome.success:
            event = TaskSettledEvent(
                task_id=task.id,
                target_id=task.target_id,
                url=task.url,
                success=True,
                status_code=HTTP_OK,
                payload_bytes=len(outcome.payload),
            )
        else:
            event = TaskSettledEvent(
                task_id=task.id,
                target_id=task.target_id,
                url=task.url,
                success=False,
                status_code=outcome.status_code,
                error=outcome.error,
            )
        return ("task.settled", event)
