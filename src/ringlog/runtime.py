"""
Background event loop for fire-and-forget sink work.

Each logger owns one ``DispatchLoop``: a private asyncio loop running on a
daemon thread. Coroutines are submitted thread-safely and run in submission
order, which keeps per-sink delivery in log-call order no matter which thread
or event loop the caller is on.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import threading
from typing import Any, Coroutine


class DispatchLoop:
    """Lazily started single-threaded event loop."""

    def __init__(self, name: str = "ringlog-dispatch"):
        self._name = name
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._pending: set[concurrent.futures.Future[Any]] = set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future[Any]:
        """Schedule ``coro`` on the loop and return a thread-safe future."""
        with self._lock:
            loop = self._ensure_started()
            future = asyncio.run_coroutine_threadsafe(coro, loop)
            self._pending.add(future)
        # Registered outside the lock: the callback runs inline if already done.
        future.add_done_callback(self._discard)
        return future

    async def run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """Run ``coro`` on the loop and await its result from the caller's loop."""
        return await asyncio.wrap_future(self.submit(coro))

    async def drain(self) -> None:
        """Wait until everything submitted so far has finished."""
        while True:
            with self._lock:
                snapshot = list(self._pending)
            if not snapshot:
                return
            await asyncio.gather(
                *(asyncio.wrap_future(future) for future in snapshot),
                return_exceptions=True,
            )

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the loop and join its thread. Safe to call when not started."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        if loop is None or thread is None:
            return

        loop.call_soon_threadsafe(loop.stop)
        if thread is not threading.current_thread():
            thread.join(timeout)

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop

        loop = asyncio.new_event_loop()
        ready = threading.Event()
        thread = threading.Thread(
            target=self._serve,
            args=(loop, ready),
            name=self._name,
            daemon=True,
        )
        thread.start()
        ready.wait()

        self._loop = loop
        self._thread = thread
        return loop

    @staticmethod
    def _serve(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
        finally:
            try:
                loop.run_until_complete(loop.shutdown_default_executor())
            finally:
                loop.close()

    def _discard(self, future: concurrent.futures.Future[Any]) -> None:
        with self._lock:
            self._pending.discard(future)
