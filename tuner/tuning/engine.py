"""
Match detected frequencies to guitar strings and score the deviation in cents
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from config.tuner_config import MAX_FREQUENCY, MIN_FREQUENCY, TOLERANCE_CENTS
from tuner.tuning.strings import GUITAR_STRINGS, ReferenceString


def cents(frequency: float, reference: float) -> float:
    """Signed distance from reference to frequency (negative = flat)"""
    return 1200 * math.log2(frequency / reference)


class TuningVerdict(Enum):
    IN_TUNE = 'in_tune'
    FLAT = 'flat'    # lower than target, tighten
    SHARP = 'sharp'  # higher than target, loosen


def classify(deviation: float, tolerance: float = TOLERANCE_CENTS) -> TuningVerdict:
    if abs(deviation) <= tolerance:
        return TuningVerdict.IN_TUNE
    if deviation < -tolerance:
        return TuningVerdict.FLAT
    return TuningVerdict.SHARP


@dataclass(frozen=True)
class TuningResult:
    """Nearest string for one detected frequency"""
    string: ReferenceString
    cents: float
    frequency: float
    tolerance: float = TOLERANCE_CENTS

    @property
    def verdict(self) -> TuningVerdict:
        return classify(self.cents, self.tolerance)


class TuningEngine:
    """Find the closest reference string for a frequency estimate"""

    def __init__(self,
                 strings: Sequence[ReferenceString] = GUITAR_STRINGS,
                 tolerance: float = TOLERANCE_CENTS,
                 min_frequency: float = MIN_FREQUENCY,
                 max_frequency: float = MAX_FREQUENCY):
        """
        Args:
            strings: Reference table, low to high
            tolerance: Maximum absolute cents still considered in tune
            min_frequency: Estimates at or below this are ignored (Hz)
            max_frequency: Estimates at or above this are ignored (Hz)
        """
        if not strings:
            raise ValueError("At least one reference string is required")
        self.strings = tuple(strings)
        self.tolerance = tolerance
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency

    def is_usable(self, frequency: Optional[float]) -> bool:
        return (frequency is not None
                and self.min_frequency < frequency < self.max_frequency)

    def evaluate(self, frequency: Optional[float]) -> Optional[TuningResult]:
        """
        Match a frequency estimate against the reference table

        Args:
            frequency: Estimated fundamental in Hz, or None if nothing was found

        Returns:
            TuningResult for the nearest string, or None when there is no usable pitch
        """
        if not self.is_usable(frequency):
            return None

        closest = self.strings[0]
        min_distance = abs(cents(frequency, closest.frequency))

        for string in self.strings:
            distance = abs(cents(frequency, string.frequency))
            # Strict comparison keeps the earliest string on ties
            if distance < min_distance:
                min_distance = distance
                closest = string

        return TuningResult(
            string=closest,
            cents=cents(frequency, closest.frequency),
            frequency=frequency,
            tolerance=self.tolerance,
        )
