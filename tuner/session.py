"""
Streaming tuner session: audio chunks in, one rendered frame per analysis window out
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from tuner.audio.stream import AudioSource, AudioStreamError
from tuner.audio.window_assembler import SampleWindowAssembler
from tuner.display.meter import MeterRenderer, TerminalDisplay
from tuner.tuning.engine import TuningEngine, TuningResult

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    STOPPED = 'stopped'


@dataclass
class SessionStats:
    chunks: int = 0
    windows: int = 0
    pitched_windows: int = 0
    overflows: int = 0
    dropped_bytes: int = 0


class SessionController:
    """
    Owns the audio stream and drives the analysis pipeline

    All analysis runs synchronously inside the source's data callback, so
    chunks are processed strictly in arrival order and the display always
    shows the frame of the most recently completed window.
    """

    def __init__(self,
                 source: AudioSource,
                 estimator: Callable[[np.ndarray], Optional[float]],
                 engine: Optional[TuningEngine] = None,
                 renderer: Optional[MeterRenderer] = None,
                 display: Optional[TerminalDisplay] = None,
                 assembler: Optional[SampleWindowAssembler] = None):
        """
        Args:
            source: Audio input stream, owned exclusively by this session
            estimator: Window -> frequency in Hz or None
            engine: Tuning engine (defaults to standard tuning)
            renderer: Frame renderer
            display: Output surface for rendered frames
            assembler: Window assembler (defaults to the configured window size)
        """
        self.source = source
        self.estimator = estimator
        self.engine = engine or TuningEngine()
        self.renderer = renderer or MeterRenderer()
        self.display = display or TerminalDisplay()
        self.assembler = assembler or SampleWindowAssembler()

        self.state = SessionState.IDLE
        self.error = None
        self.stats = SessionStats()
        self.last_result: Optional[TuningResult] = None
        self._dropped_at_start = 0
        self._stopped = threading.Event()

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    def start(self):
        """Open the audio stream and begin analysing; no-op while running"""
        if self.state is SessionState.RUNNING:
            return

        self.state = SessionState.RUNNING
        self.error = None
        self.stats = SessionStats()
        self.last_result = None
        self.assembler.reset()
        self._dropped_at_start = self.assembler.dropped_bytes
        self._stopped.clear()

        logger.info("Starting tuner session")
        try:
            self.source.open(
                self._on_data,
                self._on_error,
                on_end=self._on_end,
                on_overflow=self._on_overflow,
            )
        except Exception as e:
            self._on_error(AudioStreamError(f"Failed to open audio source: {e}"))

    def stop(self):
        """Close the stream if open and mark the session stopped; safe to call repeatedly"""
        if self.source.is_open:
            self.source.close()

        if self.state is not SessionState.STOPPED:
            self.stats.dropped_bytes = self.assembler.dropped_bytes - self._dropped_at_start
            logger.info("Session stopped: %s", self.stats)

        self.state = SessionState.STOPPED
        self._stopped.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the session stops; returns False on timeout"""
        return self._stopped.wait(timeout)

    def process_window(self, window: np.ndarray) -> Optional[TuningResult]:
        """Estimate, match and render one full analysis window"""
        frequency = self.estimator(window)
        result = self.engine.evaluate(frequency)

        self.stats.windows += 1
        if result is not None:
            self.stats.pitched_windows += 1
            logger.debug("%.2f Hz -> %s %+.1f cents", result.frequency,
                         result.string.name, result.cents)

        self.display.show(self.renderer.render(result))
        self.last_result = result
        return result

    def _on_data(self, chunk: bytes):
        # Chunks arriving after stop() are ignored
        if self.state is not SessionState.RUNNING:
            return

        self.stats.chunks += 1
        try:
            window = self.assembler.push(chunk)
            if window is not None:
                self.process_window(window)
        except Exception as e:
            logger.exception("Unexpected failure while analysing audio")
            self.error = e
            self.stop()

    def _on_error(self, error: Exception):
        logger.error("Audio stream error: %s", error)
        self.error = error
        self.stop()

    def _on_end(self):
        logger.info("Audio stream finished")
        self.stop()

    def _on_overflow(self):
        self.stats.overflows += 1
        logger.warning("Input overflow: analysis is falling behind the audio stream")
