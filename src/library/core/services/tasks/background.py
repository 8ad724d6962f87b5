"""Fire-and-forget task pool for work that must outlive the request."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

TaskFactory = Callable[[], Awaitable[None]]


class BackgroundTaskPool:
    """Runs detached coroutines on the event loop.

    Tasks are created directly on the running loop rather than as children
    of the submitting request, so cancelling or timing out the request does
    not cancel them. Failures are logged and dropped; nothing is re-raised
    to the submitter. The pool keeps a strong reference to every task until
    it finishes.
    """

    def __init__(self, max_concurrency: int = 50):
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._tasks: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._tasks)

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, name: str, factory: TaskFactory) -> asyncio.Task | None:
        """Schedule ``factory()`` and return immediately.

        Must be called from a coroutine running on the event loop. Returns
        None when the pool has been shut down.
        """
        if self._closed:
            logger.bind(task=name).warning("background.rejected")
            return None

        task = asyncio.get_running_loop().create_task(self._run(name, factory), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, name: str, factory: TaskFactory) -> None:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)

        async with self._semaphore:
            try:
                await factory()
            except asyncio.CancelledError:
                logger.bind(task=name).warning("background.task_cancelled")
                raise
            except Exception as exc:
                logger.bind(
                    task=name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                ).opt(exception=exc).error("background.task_failed")
            else:
                logger.bind(task=name).debug("background.task_done")

    async def drain(self, timeout: float | None = None) -> bool:
        """Wait for in-flight tasks. Returns True when none are left."""
        while self._tasks:
            done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
            if pending:
                return False
        return True

    async def shutdown(self, timeout: float | None = 10.0) -> None:
        """Stop accepting work, wait up to ``timeout``, then cancel the rest."""
        self._closed = True
        if await self.drain(timeout):
            return

        stragglers = list(self._tasks)
        logger.warning("Cancelling {} pending background tasks", len(stragglers))
        for task in stragglers:
            task.cancel()
        await asyncio.gather(*stragglers, return_exceptions=True)
