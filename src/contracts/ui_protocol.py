"""Web UI websocket event and command constants."""

from __future__ import annotations

# Websocket event types (server -> browser)
EVENT_HELLO = "hello"
EVENT_TIMER_STATE = "timer_state"
EVENT_ERROR = "error"

# Websocket command actions (browser -> server)
COMMAND_COMMIT = "commit"
COMMAND_PLAY = "play"
COMMAND_PAUSE = "pause"
COMMAND_RESET = "reset"
COMMAND_BACK = "back"
COMMAND_SYNC = "sync"

MODE_COMMANDS: frozenset[str] = frozenset({COMMAND_PLAY, COMMAND_PAUSE, COMMAND_RESET})
COMMANDS: frozenset[str] = MODE_COMMANDS | {COMMAND_COMMIT, COMMAND_BACK, COMMAND_SYNC}

STICKY_EVENT_TYPES: frozenset[str] = frozenset({EVENT_TIMER_STATE})

STICKY_EVENT_ORDER: tuple[str, ...] = (EVENT_TIMER_STATE,)
