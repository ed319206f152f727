"""Parsing of websocket command messages and dispatch onto the timer controller."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from contracts.ui_protocol import (
    COMMAND_BACK,
    COMMAND_COMMIT,
    COMMAND_PAUSE,
    COMMAND_PLAY,
    COMMAND_RESET,
    COMMAND_SYNC,
    COMMANDS,
    MODE_COMMANDS,
)
from pomodoro import TimerActionResult, TimerController
from pomodoro.constants import MODES


class CommandError(Exception):
    """Raised when a websocket message is not a valid timer command."""


@dataclass(frozen=True)
class TimerCommand:
    action: str
    mode: Optional[str] = None
    minutes: Optional[int] = None


def parse_command(raw: str | bytes) -> TimerCommand:
    """Decode one JSON command message; raises CommandError on any mismatch."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise CommandError("Command must be UTF-8 text") from error

    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as error:
        raise CommandError(f"Command is not valid JSON: {error.msg}") from error

    if not isinstance(payload, dict):
        raise CommandError("Command must be a JSON object")

    action = payload.get("action")
    if not isinstance(action, str) or action not in COMMANDS:
        allowed = ", ".join(sorted(COMMANDS))
        raise CommandError(f"action must be one of: {allowed}")

    if action in MODE_COMMANDS:
        mode = payload.get("mode")
        if mode not in MODES:
            raise CommandError(f"mode must be one of: {', '.join(MODES)}")
        return TimerCommand(action=action, mode=mode)

    if action == COMMAND_COMMIT:
        minutes = payload.get("minutes")
        if isinstance(minutes, str) and minutes.strip().isdigit():
            minutes = int(minutes.strip())
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            raise CommandError("minutes must be an integer")
        return TimerCommand(action=action, minutes=minutes)

    return TimerCommand(action=action)


def apply_command(controller: TimerController, command: TimerCommand) -> TimerActionResult:
    if command.action == COMMAND_COMMIT:
        return controller.commit(int(command.minutes or 0))
    if command.action == COMMAND_PLAY:
        return controller.play(command.mode or "")
    if command.action == COMMAND_PAUSE:
        return controller.pause(command.mode or "")
    if command.action == COMMAND_RESET:
        return controller.reset(command.mode or "")
    if command.action == COMMAND_BACK:
        return controller.back_to_setup()
    if command.action == COMMAND_SYNC:
        return controller.sync()
    raise CommandError(f"Unsupported action: {command.action}")
