from __future__ import annotations

from typing import Protocol


class AudioCue(Protocol):
    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def stop(self) -> None:
        ...


class SilentAudioCue:
    """No-op cue used when audio output is disabled."""

    def play(self) -> None:
        return None

    def pause(self) -> None:
        return None

    def stop(self) -> None:
        return None
