"""Helpers for calling the async pipelines from synchronous code."""

import asyncio
import threading
from typing import Any


class EventLoopThread:
    """An event loop running forever in a daemon thread.

    Async HTTP clients keep their connection pools bound to the loop that
    created them, so every synchronous caller submits to this one loop
    instead of opening and closing a loop per call.
    """

    def __init__(self, name: str = "docsyrag-event-loop") -> None:
        self.name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """Start the loop thread on first use and return its loop."""
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever, name=self.name, daemon=True
                )
                self._thread.start()
            return self._loop

    def run(self, coro: Any) -> Any:
        """Run a coroutine on the loop thread and wait for its result.

        Raises:
            RuntimeError: If called from the loop thread itself
        """
        if threading.current_thread() is self._thread:
            coro.close()
            raise RuntimeError("run() would deadlock when called from the event loop thread")
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result()

    def stop(self) -> None:
        """Stop the loop and join its thread. A later run() starts a new one."""
        with self._lock:
            if self._loop is None:
                return
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join()
            self._loop.close()
            self._loop = None
            self._thread = None


_event_loop = EventLoopThread()


def run_async(coro: Any) -> Any:
    """Run an async coroutine on the shared background event loop.

    This is useful for calling async functions from synchronous Flask routes.
    Every call uses the same loop, so provider clients created by one request
    stay usable in the next.

    Args:
        coro: An awaitable coroutine to execute

    Returns:
        The result of the coroutine

    Note:
        For CLI commands, prefer using asyncio.run() directly.
    """
    return _event_loop.run(coro)
