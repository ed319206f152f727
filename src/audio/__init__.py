"""Public exports for the timer audio cue.

`SoundDeviceAudioCue` lives in `audio.sounddevice_cue` and is imported on
demand so that PortAudio is only required when audio output is enabled.
"""

from .base import AudioCue, SilentAudioCue
from .errors import AudioCueError
from .loader import load_wav

__all__ = [
    "AudioCue",
    "AudioCueError",
    "SilentAudioCue",
    "load_wav",
]
