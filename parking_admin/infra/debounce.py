"""Single-timer debounce on asyncio.

Each ``schedule()`` call replaces the pending timer, so the callback fires
once, ``delay_seconds`` after the last call. Once the timer has elapsed the
callback runs detached from the timer slot: a later ``schedule()`` starts a
new timer but never cancels a callback that is already running.

Example:
    debouncer = Debouncer(0.3, fetch)
    debouncer.schedule()   # keystroke "a"
    debouncer.schedule()   # keystroke "ab", timer restarted
    await debouncer.join()  # fetch ran once
    debouncer.close()
"""

import asyncio
import contextlib
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Trailing-edge debounce with at most one pending timer."""

    def __init__(self, delay_seconds: float, callback: Callable[[], Awaitable[None]]) -> None:
        """Initialize debouncer.

        Args:
            delay_seconds: Quiet period before the callback fires
            callback: Coroutine function invoked after the quiet period
        """
        self.delay_seconds = delay_seconds
        self.callback = callback
        self._timer: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self) -> None:
        """(Re)start the timer, cancelling any unexpired one."""
        if self._closed:
            logger.debug("Debouncer closed, ignoring schedule")
            return
        self.cancel()
        self._timer = asyncio.create_task(self._fire())

    def cancel(self) -> None:
        """Cancel the pending timer, if any. Running callbacks are not affected."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def close(self) -> None:
        """Cancel the pending timer and refuse further scheduling."""
        self._closed = True
        self.cancel()

    async def join(self) -> None:
        """Wait for the pending timer and any running callbacks to finish."""
        while self.pending or self._running:
            tasks = list(self._running)
            if self._timer is not None:
                tasks.append(self._timer)
            with contextlib.suppress(asyncio.CancelledError):
                await asyncio.gather(*tasks, return_exceptions=True)

    async def _fire(self) -> None:
        await asyncio.sleep(self.delay_seconds)

        current = asyncio.current_task()
        if self._timer is current:
            self._timer = None
        if self._closed or current is None:
            return

        self._running.add(current)
        try:
            await self.callback()
        except Exception:
            logger.exception("Debounced callback failed")
        finally:
            self._running.discard(current)
