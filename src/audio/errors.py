class AudioCueError(Exception):
    """Raised when the audio cue cannot be loaded or played."""

    pass
