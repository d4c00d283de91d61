"""Fixed-interval background runner for the ingestion cycle."""

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RecurringTask:
    """Runs ``func`` once right away, then every ``interval_seconds``.

    The next run waits for the previous one to finish, so runs never overlap.
    A slow run shortens the following wait instead of stacking up calls.
    """

    def __init__(
        self,
        func: Callable[[], Awaitable[object]],
        interval_seconds: float,
        name: str = "recurring-task",
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.func = func
        self.interval_seconds = interval_seconds
        self.name = name
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting %s (every %ss)", self.name, self.interval_seconds)
        self._task = asyncio.create_task(self._loop(), name=self.name)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Stopped %s", self.name)

    async def _loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            try:
                await self.func()
            except Exception:
                logger.exception("%s run failed", self.name)
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.interval_seconds - elapsed))
