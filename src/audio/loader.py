"""WAV decoding into mono float32 PCM for the audio cue."""

from __future__ import annotations

import wave
from pathlib import Path

import numpy as np

from .errors import AudioCueError


def load_wav(path: str | Path) -> tuple[np.ndarray, int]:
    """Read a PCM WAV file and return mono float32 samples in [-1, 1] and its rate."""
    try:
        with wave.open(str(path), "rb") as wav_file:
            channels = wav_file.getnchannels()
            sample_width = wav_file.getsampwidth()
            sample_rate_hz = wav_file.getframerate()
            raw = wav_file.readframes(wav_file.getnframes())
    except (OSError, EOFError, wave.Error) as error:
        raise AudioCueError(f"Failed to read audio file {path}: {error}") from error

    if sample_width == 1:
        samples = (np.frombuffer(raw, dtype=np.uint8).astype(np.float32) - 128.0) / 128.0
    elif sample_width == 2:
        samples = np.frombuffer(raw, dtype="<i2").astype(np.float32) / 32768.0
    elif sample_width == 4:
        samples = np.frombuffer(raw, dtype="<i4").astype(np.float32) / 2147483648.0
    else:
        raise AudioCueError(f"Unsupported WAV sample width: {sample_width} bytes")

    if channels > 1:
        usable = len(samples) - len(samples) % channels
        samples = samples[:usable].reshape(-1, channels).mean(axis=1)

    if len(samples) == 0:
        raise AudioCueError(f"Audio file contains no samples: {path}")

    return samples.astype(np.float32), int(sample_rate_hz)
