import tempfile
import unittest
import wave
from pathlib import Path

import numpy as np

from audio import AudioCueError, load_wav


def _write_wav(path: Path, frames: np.ndarray, *, channels: int, rate: int) -> None:
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(2)
        wav_file.setframerate(rate)
        wav_file.writeframes(frames.astype("<i2").tobytes())


class LoadWavTests(unittest.TestCase):
    def test_reads_mono_pcm16_as_float32(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "cue.wav"
            _write_wav(path, np.array([0, 16384, -32768], dtype=np.int16), channels=1, rate=8000)

            samples, rate = load_wav(path)

        self.assertEqual(8000, rate)
        self.assertEqual(np.float32, samples.dtype)
        np.testing.assert_allclose([0.0, 0.5, -1.0], samples)

    def test_downmixes_stereo_to_mono(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "stereo.wav"
            interleaved = np.array([16384, 0, -16384, -16384], dtype=np.int16)
            _write_wav(path, interleaved, channels=2, rate=16000)

            samples, rate = load_wav(path)

        self.assertEqual(16000, rate)
        np.testing.assert_allclose([0.25, -0.5], samples)

    def test_rejects_missing_and_empty_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(AudioCueError):
                load_wav(Path(temp_dir) / "missing.wav")

            empty = Path(temp_dir) / "empty.wav"
            _write_wav(empty, np.array([], dtype=np.int16), channels=1, rate=8000)
            with self.assertRaises(AudioCueError):
                load_wav(empty)

    def test_bundled_cue_is_readable(self) -> None:
        path = Path(__file__).resolve().parents[2] / "web_ui" / "audio.wav"

        samples, rate = load_wav(path)

        self.assertEqual(16000, rate)
        self.assertEqual(16000, len(samples))


if __name__ == "__main__":
    unittest.main()
