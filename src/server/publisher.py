from __future__ import annotations

import threading
from typing import Any, Optional, Protocol

from contracts.ui_protocol import EVENT_TIMER_STATE
from pomodoro import ControllerSnapshot, TimerActionResult


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


def snapshot_payload(snapshot: ControllerSnapshot) -> dict[str, Any]:
    return {
        "active_mode": snapshot.active_mode,
        "visible_screen": snapshot.visible_screen,
        "setup_enabled": snapshot.setup_enabled,
        "selected_minutes": snapshot.selected_minutes,
        "revision": snapshot.revision,
        "timers": {
            timer.mode: {
                "configured_duration": timer.configured_duration,
                "time_left": timer.time_left,
                "is_running": timer.is_running,
                "display": timer.display,
            }
            for timer in snapshot.timers
        },
    }


def result_payload(result: TimerActionResult) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "action": result.action,
        "accepted": result.accepted,
        "reason": result.reason,
        **snapshot_payload(result.snapshot),
    }
    if result.mode:
        payload["mode"] = result.mode
    return payload


class TimerStatePublisher:
    """Forwards controller results to the UI server as `timer_state` events.

    Listeners run outside the controller lock on the tick thread and on
    command workers, so results can arrive out of order. A result whose
    snapshot revision is not newer than the last published one is dropped.
    """

    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server
        self._lock = threading.Lock()
        self._last_revision = -1

    def __call__(self, result: TimerActionResult) -> None:
        self.publish_result(result)

    def publish_result(self, result: TimerActionResult) -> None:
        if not self._ui_server:
            return
        with self._lock:
            if result.snapshot.revision <= self._last_revision:
                return
            self._last_revision = result.snapshot.revision
            self._ui_server.publish(EVENT_TIMER_STATE, **result_payload(result))
