"""
Accumulate raw PCM chunks into fixed-size analysis windows
"""
from typing import Optional

import numpy as np

from config.tuner_config import BYTES_PER_SAMPLE, WINDOW_SIZE


class SampleWindowAssembler:
    """Collect 16-bit little-endian mono audio until one window is full"""

    def __init__(self, window_size: int = WINDOW_SIZE):
        """
        Args:
            window_size: Samples per analysis window
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        self.window_size = window_size
        self.window_bytes = window_size * BYTES_PER_SAMPLE
        self._buffer = bytearray()

        # Bytes past a full window are discarded, not carried over
        self.dropped_bytes = 0
        self.windows_emitted = 0

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def reset(self):
        self._buffer.clear()

    def push(self, raw: bytes) -> Optional[np.ndarray]:
        """
        Append a chunk and return a window once enough data has arrived

        Args:
            raw: Arbitrary-length chunk of int16 LE samples

        Returns:
            float32 array of window_size samples in [-1.0, 1.0], or None
        """
        self._buffer.extend(raw)

        if len(self._buffer) < self.window_bytes:
            return None

        samples = np.frombuffer(bytes(self._buffer[:self.window_bytes]), dtype='<i2')
        window = samples.astype(np.float32) / 32768.0

        self.dropped_bytes += len(self._buffer) - self.window_bytes
        self.windows_emitted += 1
        self._buffer.clear()

        return window
