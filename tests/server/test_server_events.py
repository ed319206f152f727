import datetime as dt
import json
import sys
import types
import unittest
from pathlib import Path

# Import server.events without executing src/server/__init__.py.
_SERVER_DIR = Path(__file__).resolve().parents[2] / "src" / "server"
if "server" not in sys.modules:
    _pkg = types.ModuleType("server")
    _pkg.__path__ = [str(_SERVER_DIR)]  # type: ignore[attr-defined]
    sys.modules["server"] = _pkg

from server.events import StickyEventStore, make_event


class ServerEventsTests(unittest.TestCase):
    def test_make_event_serializes_timestamp_and_payload(self) -> None:
        now = dt.datetime(2026, 2, 21, 10, 0, tzinfo=dt.timezone.utc)
        raw = make_event("timer_state", now_fn=lambda: now, action="tick", accepted=True)
        payload = json.loads(raw)

        self.assertEqual("timer_state", payload["type"])
        self.assertEqual(now.isoformat(), payload["timestamp"])
        self.assertEqual("tick", payload["action"])
        self.assertTrue(payload["accepted"])

    def test_sticky_store_ignores_non_sticky_events(self) -> None:
        store = StickyEventStore()
        store.remember("hello", '{"type":"hello"}')
        store.remember("error", '{"type":"error"}')
        self.assertEqual([], store.snapshot())

    def test_sticky_store_snapshot_follows_stable_order(self) -> None:
        store = StickyEventStore(
            sticky_types=("timer_state", "notice"),
            order=("notice", "timer_state"),
        )
        store.remember("timer_state", '{"type":"timer_state","n":1}')
        store.remember("notice", '{"type":"notice","n":2}')

        decoded_types = [json.loads(item)["type"] for item in store.snapshot()]
        self.assertEqual(["notice", "timer_state"], decoded_types)

    def test_sticky_store_overwrites_latest_timer_state(self) -> None:
        store = StickyEventStore()
        store.remember("timer_state", '{"type":"timer_state","time_left":10}')
        store.remember("timer_state", '{"type":"timer_state","time_left":9}')
        snapshot = store.snapshot()

        self.assertEqual(1, len(snapshot))
        self.assertEqual(9, json.loads(snapshot[0])["time_left"])


if __name__ == "__main__":
    unittest.main()
