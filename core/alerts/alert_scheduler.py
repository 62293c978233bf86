"""AlertScheduler: fixed-interval tick source for the alert generator.

The scheduler knows nothing about sessions or alerts. It waits one interval,
calls `on_tick`, and repeats until stopped. The owner (the session
controller) is responsible for making the tick body check that its session
is still active: cancelling the task does not guarantee that a tick which
was already scheduled will not run.

`sleep` is injectable so tests can drive ticks without real time passing:

    scheduler = AlertScheduler(3000, on_tick, sleep=fake_sleep)
    await scheduler.run(max_ticks=3)
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional


logger = logging.getLogger(__name__)


class AlertScheduler:
    """Runs `on_tick` every `interval_ms` milliseconds on the running event loop."""

    def __init__(
        self,
        interval_ms: int,
        on_tick: Callable[[], Any],
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._on_tick = on_tick
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick until cancelled, or until `max_ticks` ticks have fired."""
        fired = 0
        while max_ticks is None or fired < max_ticks:
            await self._sleep(self.interval_ms / 1000.0)
            fired += 1
            self.ticks += 1
            try:
                self._on_tick()
            except Exception:
                # A failing tick must not kill the timer.
                logger.exception("[SCHEDULER] Tick %d failed", self.ticks)

    def start(self) -> None:
        """Start ticking in the background on the current event loop.

        Raises
        ------
        RuntimeError
            If called outside a running event loop.
        """
        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.run())
        logger.debug("[SCHEDULER] Started (interval=%dms)", self.interval_ms)

    def stop(self) -> None:
        """Cancel the background task, if any. Safe to call repeatedly."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("[SCHEDULER] Stopped after %d ticks", self.ticks)
