"""Bounded-parallelism FIFO task queue."""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any

Job = Callable[[], Awaitable[Any]]


class TaskQueue:
    """
    Run at most ``limit`` jobs at once; the rest wait in submission order.

    A job is a zero-argument callable returning an awaitable. ``submit``
    returns a future resolved with the job's result or exception.
    """

    def __init__(self, limit: int = 5) -> None:
        if limit < 1:
            msg = f"limit must be >= 1, got {limit}"
            raise ValueError(msg)
        self.limit = limit
        self._running = 0
        self._pending: deque[tuple[Job, asyncio.Future[Any]]] = deque()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> int:
        return self._running

    @property
    def pending(self) -> int:
        return len(self._pending)

    def submit(self, job: Job) -> asyncio.Future[Any]:
        """Queue a job and return a future for its result."""
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending.append((job, future))
        self._run_next()
        return future

    def _run_next(self) -> None:
        while self._running < self.limit and self._pending:
            job, future = self._pending.popleft()
            if future.cancelled():
                continue
            self._running += 1
            task = asyncio.ensure_future(self._run(job, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _run(self, job: Job, future: asyncio.Future[Any]) -> None:
        try:
            result = await job()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._running -= 1
            self._run_next()
