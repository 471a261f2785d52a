"""
Foreground/background work queues.

Backend calls and cache mutation run on the background executor; every
completion is handed back to the foreground event loop.
"""
import asyncio
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

import structlog

from ..config import get_settings

logger = structlog.get_logger()


class WorkQueues:
    """A foreground event loop paired with a background executor."""

    def __init__(self, foreground: asyncio.AbstractEventLoop, background: Executor):
        self._foreground = foreground
        self._background = background

    @classmethod
    def create(
        cls,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        workers: Optional[int] = None
    ) -> "WorkQueues":
        """Build the default pair: the running loop and a small thread pool."""
        loop = loop or asyncio.get_running_loop()
        workers = workers or get_settings().background_workers
        executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="storage-trait-background"
        )
        return cls(loop, executor)

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._foreground

    def background(self, fn: Callable[..., Any], *args: Any) -> Future:
        """Run fn on the background executor."""
        future = self._background.submit(fn, *args)
        future.add_done_callback(self._log_failure)
        return future

    def foreground(self, fn: Optional[Callable[..., Any]], *args: Any, delay: Optional[float] = None) -> None:
        """Schedule fn on the foreground loop. A None callback is skipped."""
        if fn is None:
            return
        if delay is not None:
            self._foreground.call_soon_threadsafe(self._foreground.call_later, delay, fn, *args)
        else:
            self._foreground.call_soon_threadsafe(fn, *args)

    def shutdown(self, wait: bool = True) -> None:
        self._background.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                "Background task failed",
                error=str(error),
                error_type=type(error).__name__
            )
