import os
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    load_app_config,
    resolve_config_path,
)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [audio]
                    enabled = true
                    file = "sounds/tick.wav"
                    output_device = 2

                    [ui_server]
                    web_root = "web"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertTrue(app_config.audio.enabled)
            self.assertEqual(2, app_config.audio.output_device)
            self.assertEqual(
                str((root / "sounds/tick.wav").resolve()),
                app_config.audio.file,
            )
            self.assertEqual(str((root / "web").resolve()), app_config.ui_server.web_root)

    def test_missing_sections_fall_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(config_path, "")

            app_config = load_app_config(str(config_path))

            self.assertFalse(app_config.audio.enabled)
            self.assertIsNone(app_config.audio.output_device)
            self.assertEqual(8765, app_config.ui_server.port)
            self.assertEqual("", app_config.ui_server.web_root)
            self.assertEqual("pomo-timer-v1", app_config.offline.cache_name)
            self.assertEqual("/", app_config.offline.path_prefix)
            self.assertEqual(3, len(app_config.offline.external_urls))
            self.assertTrue(app_config.offline.install_on_startup)
            self.assertEqual("INFO", app_config.logging.level)

    def test_offline_section_is_parsed(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [offline]
                    cache_name = "pomo-timer-v2"
                    origin = "https://example.github.io"
                    path_prefix = "/pomo-timer"
                    external_urls = ["https://cdn.example.com/app.css", " "]
                    fallback_url = "/index.html"
                    fetch_timeout_seconds = 3
                    install_on_startup = "no"

                    [logging]
                    level = "debug"
                    """
                ).strip(),
            )

            offline = load_app_config(str(config_path)).offline

            self.assertEqual("pomo-timer-v2", offline.cache_name)
            self.assertEqual("https://example.github.io", offline.origin)
            self.assertEqual("/pomo-timer", offline.path_prefix)
            self.assertEqual(("https://cdn.example.com/app.css",), offline.external_urls)
            self.assertEqual("/index.html", offline.fallback_url)
            self.assertEqual(3.0, offline.fetch_timeout_seconds)
            self.assertFalse(offline.install_on_startup)

    def test_load_app_config_rejects_invalid_values(self) -> None:
        cases = {
            "audio without file": "[audio]\nenabled = true\n",
            "port as float": "[ui_server]\nport = 80.5\n",
            "empty cache name": '[offline]\ncache_name = ""\n',
            "urls not a list": '[offline]\nexternal_urls = "https://cdn.example.com"\n',
            "unknown log level": '[logging]\nlevel = "LOUD"\n',
            "section not a table": "audio = 5\n",
        }
        for name, content in cases.items():
            with self.subTest(case=name):
                with tempfile.TemporaryDirectory() as temp_dir:
                    config_path = Path(temp_dir) / "config.toml"
                    _write_text(config_path, content)
                    with self.assertRaises(AppConfigurationError):
                        load_app_config(str(config_path))

    def test_load_app_config_rejects_tick_interval(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(config_path, "[timer]\ntick_interval_seconds = 0.5\n")

            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(config_path))

            self.assertIn("timer.tick_interval_seconds", str(context.exception))

    def test_load_app_config_reports_missing_and_malformed_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(Path(temp_dir) / "absent.toml"))

            broken = Path(temp_dir) / "broken.toml"
            _write_text(broken, "[timer\n")
            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(broken))
            self.assertIn("Failed to parse config TOML", str(context.exception))

    def test_resolve_config_path_prefers_environment_variable(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            env_config = Path(temp_dir) / "custom.toml"
            _write_text(env_config, "")

            with patch.dict(os.environ, {"APP_CONFIG_FILE": str(env_config)}, clear=True):
                resolved = resolve_config_path()

            self.assertEqual(env_config, resolved)

    def test_resolve_config_path_uses_bundle_fallback(self) -> None:
        with tempfile.TemporaryDirectory() as cwd_dir, tempfile.TemporaryDirectory() as bundle_dir:
            bundled_config = Path(bundle_dir) / "config.toml"
            _write_text(bundled_config, "")

            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=Path(cwd_dir)):
                    with patch.object(sys, "_MEIPASS", bundle_dir, create=True):
                        resolved = resolve_config_path()

            self.assertEqual(bundled_config, resolved)


if __name__ == "__main__":
    unittest.main()
