"""
Fundamental frequency estimation for single analysis windows
"""
import logging
from typing import Optional

import numpy as np
import librosa

from config.tuner_config import (
    SAMPLE_RATE, MIN_FREQUENCY, MAX_FREQUENCY,
    YIN_THRESHOLD, YIN_FRAME_LENGTH, YIN_HOP_LENGTH, SILENCE_RMS,
    CREPE_MODEL_CAPACITY, CREPE_STEP_SIZE, CREPE_CONFIDENCE_THRESHOLD,
)

logger = logging.getLogger(__name__)


class PitchEstimator:
    """Maps one normalized window to a frequency in Hz, or None if no pitch is found"""

    name = 'base'

    def __init__(self, sample_rate: int = SAMPLE_RATE):
        self.sample_rate = sample_rate

    def estimate(self, window: np.ndarray) -> Optional[float]:
        raise NotImplementedError

    def __call__(self, window: np.ndarray) -> Optional[float]:
        return self.estimate(window)


class YinEstimator(PitchEstimator):
    """YIN estimator backed by librosa; windows without a voiced frame give None"""

    name = 'yin'

    def __init__(self, sample_rate=SAMPLE_RATE, fmin=MIN_FREQUENCY, fmax=MAX_FREQUENCY,
                 threshold=YIN_THRESHOLD, frame_length=YIN_FRAME_LENGTH,
                 hop_length=YIN_HOP_LENGTH, silence_rms=SILENCE_RMS):
        """
        Args:
            sample_rate: Sample rate of incoming windows
            fmin: Lowest frequency searched (Hz)
            fmax: Highest frequency searched (Hz)
            threshold: YIN trough threshold
            frame_length: Samples per YIN frame
            hop_length: Samples between YIN frames
            silence_rms: Windows with lower RMS are treated as silence
        """
        super().__init__(sample_rate)
        self.fmin = fmin
        self.fmax = fmax
        self.threshold = threshold
        self.frame_length = frame_length
        self.hop_length = hop_length
        self.silence_rms = silence_rms

    def estimate(self, window):
        if len(window) < self.frame_length:
            return None

        rms = float(np.sqrt(np.mean(np.square(window, dtype=np.float64))))
        if rms < self.silence_rms:
            return None

        # pYIN only decides which frames are voiced; its f0 is quantized to
        # 10-cent bins, too coarse for the tolerance, so values come from YIN
        _, voiced_flag, _ = librosa.pyin(
            window,
            fmin=self.fmin,
            fmax=self.fmax,
            sr=self.sample_rate,
            frame_length=self.frame_length,
            hop_length=self.hop_length,
            center=False,
        )
        if not np.any(voiced_flag):
            return None

        f0 = librosa.yin(
            window,
            fmin=self.fmin,
            fmax=self.fmax,
            sr=self.sample_rate,
            frame_length=self.frame_length,
            hop_length=self.hop_length,
            trough_threshold=self.threshold,
            center=False,
        )

        # Median over voiced frames ignores attack transients
        frames = min(len(f0), len(voiced_flag))
        f0 = f0[:frames][voiced_flag[:frames]]
        f0 = f0[np.isfinite(f0)]
        if len(f0) == 0:
            return None

        frequency = float(np.median(f0))
        return frequency if frequency > 0 else None


class CrepeEstimator(PitchEstimator):
    """Neural estimator using the CREPE model (optional, needs tensorflow)"""

    name = 'crepe'

    def __init__(self, sample_rate=SAMPLE_RATE, model_capacity=CREPE_MODEL_CAPACITY,
                 step_size=CREPE_STEP_SIZE, confidence_threshold=CREPE_CONFIDENCE_THRESHOLD):
        """
        Args:
            sample_rate: Sample rate of incoming windows
            model_capacity: CREPE model size ('tiny', 'small', 'medium', 'large', 'full')
            step_size: Time step in milliseconds between predictions
            confidence_threshold: Frames below this confidence are ignored
        """
        super().__init__(sample_rate)
        import crepe  # loads tensorflow, so only when this estimator is chosen

        self._crepe = crepe
        self.model_capacity = model_capacity
        self.step_size = step_size
        self.confidence_threshold = confidence_threshold

    def estimate(self, window):
        _, frequencies, confidences, _ = self._crepe.predict(
            window,
            self.sample_rate,
            model_capacity=self.model_capacity,
            step_size=self.step_size,
            viterbi=False,
            verbose=0,
        )

        # Filter out low-confidence predictions
        mask = confidences > self.confidence_threshold
        if not np.any(mask):
            return None

        return float(np.median(frequencies[mask]))


ESTIMATORS = {
    YinEstimator.name: YinEstimator,
    CrepeEstimator.name: CrepeEstimator,
}


def build_estimator(name: str, sample_rate: int = SAMPLE_RATE) -> PitchEstimator:
    """Create an estimator by name ('yin' or 'crepe')"""
    try:
        estimator_cls = ESTIMATORS[name]
    except KeyError:
        raise ValueError(f"Unknown pitch estimator: {name!r}") from None

    logger.debug("Using %s pitch estimator at %d Hz", name, sample_rate)
    return estimator_cls(sample_rate=sample_rate)
