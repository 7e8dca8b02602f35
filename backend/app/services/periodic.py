"""Fixed-interval background tasks running on the application's event loop."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Run tick() immediately and then every interval_seconds until stopped.

    A failing tick is logged and the next one runs on schedule; there is no
    backoff.
    """

    name = "periodic-task"

    def __init__(self, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    async def tick(self) -> None:
        raise NotImplementedError

    async def run_once(self) -> bool:
        """Run a single tick, returning False if it failed."""
        try:
            await self.tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("%s tick failed, retrying in %.0fs", self.name, self.interval_seconds)
            return False
        return True

    async def run_forever(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self.running:
            return self._task
        self._task = asyncio.create_task(self.run_forever(), name=self.name)
        logger.info("Started %s (every %.0fs)", self.name, self.interval_seconds)
        return self._task

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Stopped %s", self.name)
