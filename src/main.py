"""Standalone launcher for the timer UI server and its offline cache."""

import logging
import signal
import time
from pathlib import Path

from app_config import AppConfigurationError, AudioSettings, load_app_config, resolve_config_path
from audio import AudioCue, AudioCueError, SilentAudioCue
from offline import (
    HttpFetcher,
    OfflineCacheConfig,
    OfflineCacheProxy,
    OfflineConfigurationError,
    OriginRoutingFetcher,
    StaticOriginFetcher,
)
from pomodoro import TimerController
from server import ServerConfigurationError, TimerStatePublisher, UIServer, UIServerConfig


def build_audio_cue(settings: AudioSettings, logger: logging.Logger) -> AudioCue:
    if not settings.enabled:
        return SilentAudioCue()

    try:
        # Imported lazily: sounddevice needs PortAudio at import time.
        from audio.sounddevice_cue import SoundDeviceAudioCue

        return SoundDeviceAudioCue.from_file(
            settings.file,
            output_device_index=settings.output_device,
            logger=logging.getLogger("audio"),
        )
    except (AudioCueError, OSError) as error:
        logger.warning("Audio cue unavailable, continuing silently: %s", error)
        return SilentAudioCue()


def build_cache_proxy(
    config: OfflineCacheConfig,
    web_root: str,
) -> OfflineCacheProxy:
    fetcher = OriginRoutingFetcher(
        origin=config.origin,
        local=StaticOriginFetcher(
            Path(web_root),
            origin=config.origin,
            path_prefix=config.path_prefix,
        ),
        remote=HttpFetcher(
            origin=config.origin,
            timeout_seconds=config.fetch_timeout_seconds,
        ),
    )
    return OfflineCacheProxy(config, fetcher, logger=logging.getLogger("offline"))


def main() -> int:
    """Run the timer UI server process until interrupted."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("pomo_timer")

    try:
        app_config = load_app_config(str(resolve_config_path()))
        ui_config = UIServerConfig.from_settings(app_config.ui_server)
        offline_config = OfflineCacheConfig.from_settings(
            app_config.offline,
            origin=ui_config.origin,
        )
    except (AppConfigurationError, ServerConfigurationError, OfflineConfigurationError) as error:
        logger.error("Configuration error: %s", error)
        return 1

    logging.getLogger().setLevel(app_config.logging.level)

    if not ui_config.enabled:
        logger.info("UI server disabled via ui_server.enabled=false")
        return 0

    controller = TimerController(
        audio=build_audio_cue(app_config.audio, logger),
        logger=logging.getLogger("pomodoro"),
    )
    cache_proxy = build_cache_proxy(offline_config, ui_config.web_root)
    if app_config.offline.install_on_startup:
        cache_proxy.install()
        cache_proxy.activate()

    server = UIServer(
        config=ui_config,
        controller=controller,
        cache_proxy=cache_proxy,
        logger=logging.getLogger("ui_server"),
    )
    controller.set_listener(TimerStatePublisher(server))

    try:
        server.start()
        logger.info("Press Ctrl+C to stop.")

        shutdown = False

        def handle_signal(signum, frame) -> None:
            del frame
            nonlocal shutdown
            logger.info("Signal %s received, stopping.", signal.Signals(signum).name)
            shutdown = True

        signal.signal(signal.SIGINT, handle_signal)
        signal.signal(signal.SIGTERM, handle_signal)

        while not shutdown:
            time.sleep(0.2)

    except KeyboardInterrupt:
        logger.info("Stopping by user request.")
    finally:
        server.stop()
        controller.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
