"""
Periodic polling with cancellation.

A Poller runs a fetch coroutine on a fixed interval and hands each result to
a callback. The next wait only starts once the previous fetch has finished,
so fetches of one poller never overlap and results arrive in call order.
"""

from typing import Any, Awaitable, Callable, Optional, Union
import asyncio
import inspect
import logging

logger = logging.getLogger(__name__)

FetchFunc = Callable[[], Awaitable[Any]]
ResultCallback = Callable[[Any], Union[None, Awaitable[None]]]
ErrorCallback = Callable[[BaseException], Union[None, Awaitable[None]]]


class Poller:
    """
    Run ``fetch`` every ``interval`` seconds until stopped.

    Usage::

        async with Poller(client.list_messages, on_result=render, interval=5.0):
            ...

    Fetch errors are logged, passed to ``on_error`` when given, and polling
    continues with the next tick.
    """

    def __init__(
        self,
        fetch: FetchFunc,
        on_result: Optional[ResultCallback] = None,
        interval: float = 5.0,
        on_error: Optional[ErrorCallback] = None,
        run_immediately: bool = True,
        name: Optional[str] = None,
    ):
        if interval <= 0:
            raise ValueError("Polling interval must be positive")

        self.fetch = fetch
        self.on_result = on_result
        self.on_error = on_error
        self.interval = interval
        self.run_immediately = run_immediately
        self.name = name or getattr(fetch, "__name__", "poller")

        self.ticks = 0
        self.errors = 0
        self.last_result: Any = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "Poller":
        """Schedule the polling loop on the running event loop."""
        if self.running:
            raise RuntimeError(f"Poller '{self.name}' is already running")

        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"poller:{self.name}")
        logger.debug(f"Poller '{self.name}' started (interval={self.interval}s)")
        return self

    async def stop(self) -> None:
        """Cancel the polling loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Poller '{self.name}' stopped after {self.ticks} ticks")

    async def poll_once(self) -> Any:
        """Run one fetch and deliver its result."""
        result = await self.fetch()
        self.ticks += 1
        self.last_result = result
        if self.on_result is not None:
            outcome = self.on_result(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    async def _run(self) -> None:
        if not self.run_immediately:
            await asyncio.sleep(self.interval)

        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.errors += 1
                logger.warning(f"Poller '{self.name}' fetch failed: {e}")
                if self.on_error is not None:
                    outcome = self.on_error(e)
                    if inspect.isawaitable(outcome):
                        await outcome

            await asyncio.sleep(self.interval)

    async def __aenter__(self) -> "Poller":
        return self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
