"""
Replay audio or video files through the tuner
"""
import logging
import threading
from pathlib import Path

from pydub import AudioSegment

from config.tuner_config import SAMPLE_RATE, BYTES_PER_SAMPLE, FILE_CHUNK_BYTES
from tuner.audio.stream import AudioSource, AudioStreamError

logger = logging.getLogger(__name__)


class FileSource(AudioSource):
    """Replay an audio or video file as if it were live input"""

    def __init__(self, file_path, sample_rate=SAMPLE_RATE, chunk_bytes=FILE_CHUNK_BYTES,
                 realtime=False):
        """
        Args:
            file_path: Path to any file ffmpeg can decode (wav works without it)
            sample_rate: Rate the audio is resampled to
            chunk_bytes: Size of each delivered chunk
            realtime: Pace delivery at the audio's own speed
        """
        super().__init__(sample_rate)
        self.file_path = Path(file_path)
        self.chunk_bytes = chunk_bytes
        self.realtime = realtime
        self._thread = None
        self._stop_event = threading.Event()

    @property
    def is_open(self):
        return self._thread is not None

    def open(self, on_data, on_error, on_end=None, on_overflow=None):
        if self._thread is not None:
            return

        self._bind(on_data, on_error, on_end, on_overflow)
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='file-source', daemon=True)
        self._thread.start()

    def load(self) -> bytes:
        """Decode the file to mono 16-bit PCM at the session rate"""
        if not self.file_path.exists():
            raise FileNotFoundError(f"Input file not found: {self.file_path}")

        segment = AudioSegment.from_file(str(self.file_path))

        # Convert to mono
        if segment.channels > 1:
            segment = segment.set_channels(1)

        segment = segment.set_frame_rate(self.sample_rate).set_sample_width(BYTES_PER_SAMPLE)
        logger.info("Loaded %s: %.2fs @ %d Hz", self.file_path, segment.duration_seconds,
                    self.sample_rate)
        return segment.raw_data

    def _run(self):
        try:
            pcm = self.load()
        except Exception as e:
            self._on_error(AudioStreamError(f"Failed to read audio from {self.file_path}: {e}"))
            return

        seconds_per_chunk = self.chunk_bytes / (self.sample_rate * BYTES_PER_SAMPLE)

        for offset in range(0, len(pcm), self.chunk_bytes):
            if self._stop_event.is_set():
                return
            self._on_data(pcm[offset:offset + self.chunk_bytes])
            if self.realtime:
                self._stop_event.wait(seconds_per_chunk)

        if not self._stop_event.is_set() and self._on_end is not None:
            self._on_end()

    def close(self):
        thread, self._thread = self._thread, None
        if thread is None:
            return

        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()
