from .service import (
    ChangeListener,
    ControllerSnapshot,
    TimerAction,
    TimerActionResult,
    TimerController,
    TimerMode,
    TimerSnapshot,
    classify_duration,
    format_display,
)
from .ticks import ThreadingTickScheduler, TickHandle, TickScheduler

__all__ = [
    "ChangeListener",
    "ControllerSnapshot",
    "ThreadingTickScheduler",
    "TickHandle",
    "TickScheduler",
    "TimerAction",
    "TimerActionResult",
    "TimerController",
    "TimerMode",
    "TimerSnapshot",
    "classify_duration",
    "format_display",
]
