"""
Live microphone capture with sounddevice (PortAudio)
"""
import logging
import threading

import sounddevice as sd

from config.tuner_config import SAMPLE_RATE
from tuner.audio.stream import AudioSource, AudioStreamError

logger = logging.getLogger(__name__)


class MicrophoneSource(AudioSource):
    """Capture from an input device with sounddevice (PortAudio)"""

    def __init__(self, sample_rate=SAMPLE_RATE, device=None, blocksize=0):
        """
        Args:
            sample_rate: Capture rate in Hz
            device: sounddevice device index or name (None for the default input)
            blocksize: Frames per callback (0 lets PortAudio choose)
        """
        super().__init__(sample_rate)
        self.device = device
        self.blocksize = blocksize
        self._stream = None
        self._closing = False
        self._audio_thread = None

    @property
    def is_open(self):
        return self._stream is not None

    def open(self, on_data, on_error, on_end=None, on_overflow=None):
        if self._stream is not None:
            return

        self._bind(on_data, on_error, on_end, on_overflow)
        self._closing = False

        try:
            self._stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype='int16',
                blocksize=self.blocksize,
                device=self.device,
                callback=self._callback,
                finished_callback=self._finished,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            # ValueError: no device matches the requested name or index
            logger.debug("Failed to open input device %r", self.device, exc_info=True)
            self._closing = True
            self._release()
            on_error(AudioStreamError(f"Failed to start audio stream: {e}"))
            return

        logger.info("Microphone stream started (device=%s, %d Hz)",
                    self.device if self.device is not None else 'default', self.sample_rate)

    def _callback(self, indata, frames, time_info, status):
        self._audio_thread = threading.get_ident()

        if self._closing:
            raise sd.CallbackAbort

        if status.input_overflow and self._on_overflow is not None:
            self._on_overflow()

        self._on_data(bytes(indata))

        # The handler may have closed us from inside this callback
        if self._closing:
            raise sd.CallbackAbort

    def _finished(self):
        self._audio_thread = threading.get_ident()
        if not self._closing:
            self._on_error(AudioStreamError("Audio input stream ended unexpectedly"))

    def close(self):
        if self._stream is None:
            return

        self._closing = True

        # PortAudio streams cannot be closed from their own callback;
        # the callback aborts instead and a later close() releases the stream
        if threading.get_ident() == self._audio_thread:
            return

        self._release()
        logger.info("Microphone stream closed")

    def _release(self):
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close(ignore_errors=True)


def list_input_devices():
    """Return (index, name, default_samplerate) for every device with input channels"""
    devices = []
    for index, info in enumerate(sd.query_devices()):
        if info['max_input_channels'] > 0:
            devices.append((index, info['name'], info['default_samplerate']))
    return devices
