"""Periodic background jobs owned by the application lifespan"""
import asyncio
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

logger = structlog.get_logger()


class PeriodicTask:
    """Run ``job`` every ``interval`` until stopped.

    A failing run is logged and the job runs again at the next tick.
    ``stop()`` waits for an in-flight run to finish instead of cancelling it.
    """

    def __init__(
        self,
        name: str,
        interval: Union[timedelta, float],
        job: Callable[[], Awaitable[Any]],
        run_immediately: bool = True,
    ):
        self.name = name
        self.interval = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        self.job = job
        self.run_immediately = run_immediately
        self.runs = 0
        self.failures = 0
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name=f"periodic:{self.name}")
        logger.info("periodic_task_started", task=self.name, interval_seconds=self.interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        logger.info("periodic_task_stopped", task=self.name, runs=self.runs, failures=self.failures)

    async def run_once(self) -> Any:
        self.runs += 1
        try:
            return await self.job()
        except Exception as e:
            self.failures += 1
            logger.error("periodic_task_failed", task=self.name, error=str(e))
            return None

    async def _wait(self) -> bool:
        """Sleep one interval; True if stop was requested meanwhile"""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            return True
        except asyncio.TimeoutError:
            return False

    async def _run(self) -> None:
        if not self.run_immediately and await self._wait():
            return
        while not self._stop_event.is_set():
            await self.run_once()
            if await self._wait():
                return
