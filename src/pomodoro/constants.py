"""Mode, screen, action, and reason constants used by the timer controller."""

from __future__ import annotations

MODE_FOCUS = "focus"
MODE_SHORT_BREAK = "shortBreak"
MODE_LONG_BREAK = "longBreak"

MODES: tuple[str, ...] = (MODE_FOCUS, MODE_SHORT_BREAK, MODE_LONG_BREAK)

SCREEN_SETUP = "setup"
SCREENS: tuple[str, ...] = (SCREEN_SETUP, *MODES)

DEFAULT_DURATIONS_SECONDS: dict[str, int] = {
    MODE_FOCUS: 20 * 60,
    MODE_SHORT_BREAK: 5 * 60,
    MODE_LONG_BREAK: 45 * 60,
}

# Committed minutes equal to this value select focus; below is a short
# break, above is a long break.
FOCUS_MINUTES = 20

MIN_SELECTABLE_MINUTES = 1
MAX_SELECTABLE_MINUTES = 60
DURATION_CHOICES: tuple[int, ...] = tuple(
    range(MIN_SELECTABLE_MINUTES, MAX_SELECTABLE_MINUTES + 1)
)
DEFAULT_SELECTED_MINUTES = 25

TICK_INTERVAL_SECONDS = 1.0

ACTION_COMMIT = "commit"
ACTION_PLAY = "play"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_BACK = "back"
ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_STARTED = "started"
REASON_RESUMED = "resumed"
REASON_PAUSED = "paused"
REASON_RESET = "reset"
REASON_BACK_TO_SETUP = "back_to_setup"
REASON_ALREADY_RUNNING = "already_running"
REASON_NOT_RUNNING = "not_running"
REASON_UNKNOWN_MODE = "unknown_mode"
REASON_INVALID_DURATION = "invalid_duration"
REASON_SETUP_LOCKED = "setup_locked"
REASON_TICK = "tick"
REASON_COMPLETED = "completed"
REASON_STALE_TICK = "stale_tick"
REASON_SYNC = "sync"
