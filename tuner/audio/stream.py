"""
Audio input stream contract shared by microphone capture and file replay
"""
from config.tuner_config import SAMPLE_RATE, CHANNELS


class AudioStreamError(IOError):
    """Audio input failed or ended unexpectedly"""


class AudioSource:
    """
    Stream of raw mono int16 little-endian PCM chunks

    Subclasses deliver chunks through on_data, report failures through
    on_error and, for finite inputs, call on_end after the last chunk.
    on_overflow is called when the driver reports lost input.
    """

    def __init__(self, sample_rate=SAMPLE_RATE):
        self.sample_rate = sample_rate
        self.channels = CHANNELS
        self._on_data = None
        self._on_error = None
        self._on_end = None
        self._on_overflow = None

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def open(self, on_data, on_error, on_end=None, on_overflow=None):
        raise NotImplementedError

    def close(self):
        raise NotImplementedError

    def _bind(self, on_data, on_error, on_end, on_overflow):
        self._on_data = on_data
        self._on_error = on_error
        self._on_end = on_end
        self._on_overflow = on_overflow
