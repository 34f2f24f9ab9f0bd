import asyncio
import logging
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class FanIn:
    """
    🔀 Join for concurrently issued store operations 🔀

    Spawned coroutines run as tasks on the current event loop. The join
    resolves exactly once:

    ------------------------------------------------------------
    🟢 every task finished cleanly       => resolves with no error
    🔴 any task raised                   => resolves with the FIRST error
    ⚪ nothing was spawned               => resolves immediately
    ------------------------------------------------------------

    After the first error the remaining tasks are NOT cancelled. They
    keep running, and whatever they produce (successes or further
    errors) is absorbed here instead of being signalled a second time.

    Example:
    ------------------------------------------------------------
    fan_in = FanIn("index widget:w1")
    for key in index_keys:
        fan_in.spawn(store.set_add(key, member))
    await fan_in.join()        # raises the first error, if any
    ------------------------------------------------------------
    """

    def __init__(self, label: str = "fan-in"):
        self.label = label
        self._tasks: set[asyncio.Task] = set()
        self._spawned = 0
        self._finished = 0
        self._first_error: Optional[BaseException] = None
        self._resolved = asyncio.Event()
        self._sealed = False

    @property
    def spawned(self) -> int:
        """Number of tasks started so far."""
        return self._spawned

    @property
    def finished(self) -> int:
        """Number of tasks that have completed, successfully or not."""
        return self._finished

    @property
    def first_error(self) -> Optional[BaseException]:
        return self._first_error

    @property
    def resolved(self) -> bool:
        return self._resolved.is_set()

    def spawn(self, awaitable: Awaitable[Any]) -> asyncio.Task:
        """
        Start one operation concurrently.

        Raises:
            RuntimeError: If join() has already been called
        """
        if self._sealed:
            raise RuntimeError(f"{self.label}: cannot spawn after join()")

        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        self._spawned += 1
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        self._finished += 1

        if task.cancelled():
            error: Optional[BaseException] = asyncio.CancelledError()
        else:
            error = task.exception()

        if error is not None:
            if self._first_error is None:
                self._first_error = error
                self._resolved.set()
            else:
                logger.debug("%s: absorbed error after first failure: %r", self.label, error)
            return

        if self._first_error is not None:
            logger.debug("%s: absorbed late success after first failure", self.label)
            return

        if self._sealed and self._finished == self._spawned:
            self._resolved.set()

    async def join(self) -> None:
        """
        Wait for the outcome.

        Raises:
            The first error raised by any spawned operation
        """
        self._sealed = True
        if self._first_error is None and self._finished == self._spawned:
            self._resolved.set()

        await self._resolved.wait()

        if self._first_error is not None:
            raise self._first_error
