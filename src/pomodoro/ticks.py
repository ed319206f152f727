"""Cancellable one-second tick source backed by a daemon thread."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol


class TickHandle(Protocol):
    @property
    def active(self) -> bool:
        ...

    def cancel(self) -> None:
        ...


class TickScheduler(Protocol):
    def schedule(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> TickHandle:
        ...


class ThreadTickHandle:
    """Handle for one periodic callback; cancel() is idempotent and never blocks."""

    def __init__(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
        logger: logging.Logger,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")
        self._interval_seconds = float(interval_seconds)
        self._callback = callback
        self._logger = logger
        self._cancelled = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="tick-source",
        )

    @property
    def active(self) -> bool:
        return not self._cancelled.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        # Never join here: cancel() may run on the tick thread itself or while
        # the caller holds a lock the callback is waiting for.
        self._cancelled.set()

    def _run(self) -> None:
        while not self._cancelled.wait(self._interval_seconds):
            try:
                self._callback()
            except Exception as error:
                self._logger.error("Tick callback failed: %s", error, exc_info=True)


class ThreadingTickScheduler:
    """Starts one daemon thread per scheduled handle."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("ticks")

    def schedule(
        self,
        interval_seconds: float,
        callback: Callable[[], None],
    ) -> ThreadTickHandle:
        handle = ThreadTickHandle(interval_seconds, callback, self._logger)
        handle.start()
        return handle
