import threading
import unittest

from pomodoro.ticks import ThreadingTickScheduler, ThreadTickHandle


class ThreadingTickSchedulerTests(unittest.TestCase):
    def test_schedule_fires_callback_repeatedly(self) -> None:
        fired = threading.Event()
        calls: list[int] = []

        def callback() -> None:
            calls.append(1)
            if len(calls) >= 2:
                fired.set()

        handle = ThreadingTickScheduler().schedule(0.01, callback)
        try:
            self.assertTrue(fired.wait(2.0))
        finally:
            handle.cancel()
        self.assertFalse(handle.active)

    def test_cancel_is_idempotent(self) -> None:
        handle = ThreadingTickScheduler().schedule(60.0, lambda: None)
        self.assertTrue(handle.active)

        handle.cancel()
        handle.cancel()

        self.assertFalse(handle.active)

    def test_callback_errors_are_logged_and_ticking_continues(self) -> None:
        fired = threading.Event()
        calls: list[int] = []

        def callback() -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")
            fired.set()

        with self.assertLogs("ticks", level="ERROR"):
            handle = ThreadingTickScheduler().schedule(0.01, callback)
            try:
                self.assertTrue(fired.wait(2.0))
            finally:
                handle.cancel()

    def test_rejects_non_positive_interval(self) -> None:
        with self.assertRaises(ValueError):
            ThreadTickHandle(0, lambda: None, logger=None)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
