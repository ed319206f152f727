import unittest

from pomodoro import TimerController
from server.commands import CommandError, TimerCommand, apply_command, parse_command


class _IdleTickHandle:
    def cancel(self) -> None:
        return None

    @property
    def active(self) -> bool:
        return False


class _IdleTickScheduler:
    def schedule(self, interval_seconds, callback):
        del interval_seconds, callback
        return _IdleTickHandle()


class ParseCommandTests(unittest.TestCase):
    def test_parses_mode_command(self) -> None:
        command = parse_command('{"action": "pause", "mode": "shortBreak"}')
        self.assertEqual(TimerCommand(action="pause", mode="shortBreak"), command)

    def test_parses_commit_with_numeric_string_minutes(self) -> None:
        command = parse_command(b'{"action": "commit", "minutes": " 30 "}')
        self.assertEqual(TimerCommand(action="commit", minutes=30), command)

    def test_parses_bare_actions(self) -> None:
        self.assertEqual(TimerCommand(action="back"), parse_command('{"action": "back"}'))
        self.assertEqual(TimerCommand(action="sync"), parse_command('{"action": "sync"}'))

    def test_rejects_malformed_messages(self) -> None:
        for raw in (
            "not json",
            "[1, 2]",
            '{"action": "explode"}',
            '{"action": "play", "mode": "nap"}',
            '{"action": "commit", "minutes": true}',
            '{"action": "commit", "minutes": "ten"}',
            b"\xff\xfe",
        ):
            with self.subTest(raw=raw):
                with self.assertRaises(CommandError):
                    parse_command(raw)


class ApplyCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = TimerController(scheduler=_IdleTickScheduler())

    def tearDown(self) -> None:
        self.controller.close()

    def test_commit_dispatches_to_classified_mode(self) -> None:
        result = apply_command(self.controller, TimerCommand(action="commit", minutes=20))

        self.assertTrue(result.accepted)
        self.assertEqual("focus", result.mode)
        self.assertEqual("focus", result.snapshot.active_mode)

    def test_pause_and_play_round_trip_through_controller(self) -> None:
        apply_command(self.controller, TimerCommand(action="play", mode="longBreak"))
        paused = apply_command(self.controller, TimerCommand(action="pause", mode="longBreak"))
        rejected = apply_command(self.controller, TimerCommand(action="pause", mode="longBreak"))

        self.assertEqual("paused", paused.reason)
        self.assertFalse(rejected.accepted)
        self.assertEqual("not_running", rejected.reason)

    def test_back_and_sync(self) -> None:
        back = apply_command(self.controller, TimerCommand(action="back"))
        sync = apply_command(self.controller, TimerCommand(action="sync"))

        self.assertEqual("back_to_setup", back.reason)
        self.assertEqual("sync", sync.action)
        self.assertEqual("setup", sync.snapshot.visible_screen)

    def test_unknown_action_raises(self) -> None:
        with self.assertRaises(CommandError):
            apply_command(self.controller, TimerCommand(action="explode"))


if __name__ == "__main__":
    unittest.main()
