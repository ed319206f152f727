"""Thread-safe in-memory controller for the three preset countdown timers."""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from audio import AudioCue, AudioCueError, SilentAudioCue

from .constants import (
    ACTION_BACK,
    ACTION_COMMIT,
    ACTION_COMPLETED,
    ACTION_PAUSE,
    ACTION_PLAY,
    ACTION_RESET,
    ACTION_SYNC,
    ACTION_TICK,
    DEFAULT_DURATIONS_SECONDS,
    DEFAULT_SELECTED_MINUTES,
    FOCUS_MINUTES,
    MAX_SELECTABLE_MINUTES,
    MIN_SELECTABLE_MINUTES,
    MODE_FOCUS,
    MODE_LONG_BREAK,
    MODE_SHORT_BREAK,
    MODES,
    REASON_ALREADY_RUNNING,
    REASON_BACK_TO_SETUP,
    REASON_COMPLETED,
    REASON_INVALID_DURATION,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_RESUMED,
    REASON_SETUP_LOCKED,
    REASON_STALE_TICK,
    REASON_STARTED,
    REASON_SYNC,
    REASON_TICK,
    REASON_UNKNOWN_MODE,
    SCREEN_SETUP,
    TICK_INTERVAL_SECONDS,
)
from .ticks import ThreadingTickScheduler, TickHandle, TickScheduler

TimerMode = Literal["focus", "shortBreak", "longBreak"]
TimerAction = Literal[
    "commit", "play", "pause", "reset", "back", "sync", "tick", "completed"
]


def classify_duration(minutes: int) -> TimerMode:
    """Map committed minutes onto the mode whose screen runs them."""
    if minutes < FOCUS_MINUTES:
        return MODE_SHORT_BREAK
    if minutes == FOCUS_MINUTES:
        return MODE_FOCUS
    return MODE_LONG_BREAK


def format_display(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of one timer record."""
    mode: TimerMode
    configured_duration: int
    time_left: int
    is_running: bool

    @property
    def display(self) -> str:
        return format_display(self.time_left)


@dataclass(frozen=True)
class ControllerSnapshot:
    """Read-only view of the whole controller exposed to publishers and tests."""
    active_mode: Optional[TimerMode]
    visible_screen: str
    setup_enabled: bool
    selected_minutes: int
    timers: tuple[TimerSnapshot, ...]
    # Increases with every accepted operation; orders snapshots taken under the lock.
    revision: int = 0

    def timer(self, mode: str) -> TimerSnapshot:
        for timer in self.timers:
            if timer.mode == mode:
                return timer
        raise KeyError(mode)

    @property
    def running_mode(self) -> Optional[TimerMode]:
        for timer in self.timers:
            if timer.is_running:
                return timer.mode
        return None


@dataclass(frozen=True)
class TimerActionResult:
    """Result envelope returned after applying a controller operation."""
    action: TimerAction
    accepted: bool
    reason: str
    snapshot: ControllerSnapshot
    mode: Optional[TimerMode] = None


ChangeListener = Callable[[TimerActionResult], None]


@dataclass
class _TimerRecord:
    configured_duration: int
    time_left: int
    is_running: bool = False


class TimerController:
    """Owns the three timer records, the single tick source, and screen state."""

    def __init__(
        self,
        *,
        scheduler: Optional[TickScheduler] = None,
        audio: Optional[AudioCue] = None,
        tick_interval_seconds: float = TICK_INTERVAL_SECONDS,
        on_change: Optional[ChangeListener] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be greater than zero")

        self._logger = logger or logging.getLogger("pomodoro")
        self._scheduler = scheduler or ThreadingTickScheduler(logger=self._logger)
        self._audio = audio or SilentAudioCue()
        self._tick_interval_seconds = float(tick_interval_seconds)
        self._on_change = on_change
        self._lock = threading.Lock()

        self._timers: dict[str, _TimerRecord] = {
            mode: _TimerRecord(configured_duration=seconds, time_left=seconds)
            for mode, seconds in DEFAULT_DURATIONS_SECONDS.items()
        }
        self._active_mode: Optional[TimerMode] = None
        self._visible_screen: str = SCREEN_SETUP
        self._selected_minutes = DEFAULT_SELECTED_MINUTES
        self._tick_handle: Optional[TickHandle] = None
        self._tick_generation = 0
        self._revision = 0

    def set_listener(self, on_change: Optional[ChangeListener]) -> None:
        self._on_change = on_change

    def snapshot(self) -> ControllerSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def sync(self) -> TimerActionResult:
        with self._lock:
            return self._result_locked(ACTION_SYNC, True, REASON_SYNC)

    def commit(self, minutes: int) -> TimerActionResult:
        with self._lock:
            if (
                isinstance(minutes, bool)
                or not isinstance(minutes, int)
                or not MIN_SELECTABLE_MINUTES <= minutes <= MAX_SELECTABLE_MINUTES
            ):
                return self._result_locked(ACTION_COMMIT, False, REASON_INVALID_DURATION)
            if self._running_mode_locked() is not None:
                return self._result_locked(ACTION_COMMIT, False, REASON_SETUP_LOCKED)

            mode = classify_duration(minutes)
            record = self._timers[mode]
            record.configured_duration = minutes * 60
            record.time_left = record.configured_duration
            self._selected_minutes = minutes
            self._visible_screen = mode
            self._start_locked(mode)
            self._logger.info(
                "Timer committed: minutes=%d mode=%s duration=%ss",
                minutes,
                mode,
                record.configured_duration,
            )
            result = self._result_locked(ACTION_COMMIT, True, REASON_STARTED, mode)
        self._notify(result)
        return result

    def play(self, mode: str) -> TimerActionResult:
        with self._lock:
            if mode not in self._timers:
                return self._result_locked(ACTION_PLAY, False, REASON_UNKNOWN_MODE)
            record = self._timers[mode]
            if record.is_running:
                return self._result_locked(ACTION_PLAY, False, REASON_ALREADY_RUNNING, mode)

            resumed = 0 < record.time_left < record.configured_duration
            self._start_locked(mode)
            self._logger.info(
                "Timer %s: mode=%s remaining=%ss",
                "resumed" if resumed else "started",
                mode,
                record.time_left,
            )
            reason = REASON_RESUMED if resumed else REASON_STARTED
            result = self._result_locked(ACTION_PLAY, True, reason, mode)
        self._notify(result)
        return result

    def pause(self, mode: str) -> TimerActionResult:
        with self._lock:
            if mode not in self._timers:
                return self._result_locked(ACTION_PAUSE, False, REASON_UNKNOWN_MODE)
            record = self._timers[mode]
            if not record.is_running:
                return self._result_locked(ACTION_PAUSE, False, REASON_NOT_RUNNING, mode)

            self._pause_locked(mode)
            self._logger.info(
                "Timer paused: mode=%s remaining=%ss",
                mode,
                record.time_left,
            )
            result = self._result_locked(ACTION_PAUSE, True, REASON_PAUSED, mode)
        self._notify(result)
        return result

    def reset(self, mode: str) -> TimerActionResult:
        with self._lock:
            if mode not in self._timers:
                return self._result_locked(ACTION_RESET, False, REASON_UNKNOWN_MODE)
            record = self._timers[mode]
            if record.is_running:
                self._stop_tick_locked()
                record.is_running = False
                self._active_mode = None

            record.time_left = record.configured_duration
            if self._running_mode_locked() is None:
                self._call_audio("stop")
            self._visible_screen = SCREEN_SETUP
            self._logger.info(
                "Timer reset: mode=%s duration=%ss",
                mode,
                record.configured_duration,
            )
            result = self._result_locked(ACTION_RESET, True, REASON_RESET, mode)
        self._notify(result)
        return result

    def back_to_setup(self) -> TimerActionResult:
        with self._lock:
            running_mode = self._running_mode_locked()
            if running_mode is not None:
                self._pause_locked(running_mode)
                self._logger.info(
                    "Timer paused on leaving screen: mode=%s remaining=%ss",
                    running_mode,
                    self._timers[running_mode].time_left,
                )
            self._visible_screen = SCREEN_SETUP
            result = self._result_locked(
                ACTION_BACK,
                True,
                REASON_BACK_TO_SETUP,
                running_mode,
            )
        self._notify(result)
        return result

    def close(self) -> None:
        """Cancel the tick source and silence audio; used on shutdown."""
        with self._lock:
            running_mode = self._running_mode_locked()
            if running_mode is not None:
                self._timers[running_mode].is_running = False
            self._stop_tick_locked()
            self._active_mode = None
            self._call_audio("stop")

    def _handle_tick(self, mode: TimerMode, generation: int) -> TimerActionResult:
        with self._lock:
            record = self._timers[mode]
            if (
                generation != self._tick_generation
                or self._active_mode != mode
                or not record.is_running
            ):
                self._logger.debug("Ignoring stale tick for mode=%s", mode)
                return self._result_locked(ACTION_TICK, False, REASON_STALE_TICK, mode)

            if record.time_left > 0:
                record.time_left -= 1

            if record.time_left == 0:
                self._stop_tick_locked()
                record.is_running = False
                self._active_mode = None
                self._visible_screen = SCREEN_SETUP
                self._call_audio("stop")
                self._logger.info("Timer completed: mode=%s", mode)
                result = self._result_locked(ACTION_COMPLETED, True, REASON_COMPLETED, mode)
            else:
                result = self._result_locked(ACTION_TICK, True, REASON_TICK, mode)
        self._notify(result)
        return result

    def _start_locked(self, mode: TimerMode) -> None:
        previous = self._active_mode
        self._stop_tick_locked()
        if previous is not None and previous != mode:
            self._timers[previous].is_running = False
            self._logger.info("Timer paused by switch: mode=%s", previous)

        self._active_mode = mode
        self._timers[mode].is_running = True
        self._call_audio("play")

        self._tick_generation += 1
        callback = functools.partial(self._handle_tick, mode, self._tick_generation)
        self._tick_handle = self._scheduler.schedule(self._tick_interval_seconds, callback)

    def _pause_locked(self, mode: TimerMode) -> None:
        self._stop_tick_locked()
        self._timers[mode].is_running = False
        self._active_mode = None
        self._call_audio("pause")

    def _stop_tick_locked(self) -> None:
        handle = self._tick_handle
        self._tick_handle = None
        # Bumping the generation makes any in-flight callback a no-op.
        self._tick_generation += 1
        if handle is not None:
            handle.cancel()

    def _running_mode_locked(self) -> Optional[TimerMode]:
        for mode in MODES:
            if self._timers[mode].is_running:
                return mode
        return None

    def _call_audio(self, operation: str) -> None:
        try:
            getattr(self._audio, operation)()
        except AudioCueError as error:
            self._logger.warning("Audio %s failed: %s", operation, error)

    def _notify(self, result: TimerActionResult) -> None:
        listener = self._on_change
        if listener is None:
            return
        try:
            listener(result)
        except Exception as error:
            self._logger.error("Timer change listener failed: %s", error, exc_info=True)

    def _result_locked(
        self,
        action: TimerAction,
        accepted: bool,
        reason: str,
        mode: Optional[TimerMode] = None,
    ) -> TimerActionResult:
        if accepted:
            self._revision += 1
        return TimerActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
            mode=mode,
        )

    def _snapshot_locked(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            active_mode=self._active_mode,
            visible_screen=self._visible_screen,
            setup_enabled=self._running_mode_locked() is None,
            selected_minutes=self._selected_minutes,
            timers=tuple(
                TimerSnapshot(
                    mode=mode,
                    configured_duration=self._timers[mode].configured_duration,
                    time_left=self._timers[mode].time_left,
                    is_running=self._timers[mode].is_running,
                )
                for mode in MODES
            ),
            revision=self._revision,
        )
