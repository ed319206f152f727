"""Sounddevice-backed audio cue with play, pause-in-place, and rewind."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

import numpy as np
import sounddevice as sd

from .errors import AudioCueError
from .loader import load_wav


class SoundDeviceAudioCue:
    """Plays a mono PCM buffer, remembering the position across pauses."""

    def __init__(
        self,
        samples: np.ndarray,
        sample_rate_hz: int,
        output_device_index: Optional[int] = None,
        blocksize: int = 2048,
        logger: Optional[logging.Logger] = None,
    ):
        if samples.ndim != 1:
            raise AudioCueError("Expected mono PCM array for playback")
        if len(samples) == 0:
            raise AudioCueError("Cannot play empty audio buffer")
        if sample_rate_hz <= 0:
            raise AudioCueError("sample_rate_hz must be greater than zero")

        self._samples = samples.astype(np.float32, copy=False)
        self._sample_rate_hz = int(sample_rate_hz)
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger("audio")
        self._lock = threading.Lock()
        self._stream: Optional[sd.OutputStream] = None
        self._position = 0

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        output_device_index: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "SoundDeviceAudioCue":
        samples, sample_rate_hz = load_wav(path)
        return cls(
            samples,
            sample_rate_hz,
            output_device_index=output_device_index,
            logger=logger,
        )

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_playing(self) -> bool:
        stream = self._stream
        return stream is not None and bool(stream.active)

    def play(self) -> None:
        with self._lock:
            if self._stream is not None:
                if self._stream.active:
                    return
                # Stream finished on its own; release it before reopening.
                self._close_stream_locked()

            if self._position >= len(self._samples):
                self._position = 0

            try:
                stream = sd.OutputStream(
                    channels=1,
                    samplerate=self._sample_rate_hz,
                    blocksize=self._blocksize,
                    callback=self._callback,
                    device=self._output_device_index,
                )
                stream.start()
            except Exception as error:
                raise AudioCueError(f"Audio playback failed: {error}") from error

            self._stream = stream
            self._logger.debug("Audio cue playing from sample %d", self._position)

    def pause(self) -> None:
        with self._lock:
            self._close_stream_locked()

    def stop(self) -> None:
        with self._lock:
            try:
                self._close_stream_locked()
            finally:
                self._position = 0

    def _close_stream_locked(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is None:
            return
        try:
            stream.stop()
            stream.close()
        except Exception as error:
            raise AudioCueError(f"Audio stop failed: {error}") from error

    def _callback(self, outdata, frames, time_info, status) -> None:
        del time_info
        if status:
            self._logger.warning("Sounddevice status: %s", status)

        start = self._position
        end = start + frames
        chunk = self._samples[start:end]

        if len(chunk) < frames:
            outdata[: len(chunk), 0] = chunk
            outdata[len(chunk) :, 0] = 0
            self._position = len(self._samples)
            raise sd.CallbackStop()

        outdata[:, 0] = chunk
        self._position = end
