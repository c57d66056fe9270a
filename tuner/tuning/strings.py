"""
Reference pitches for the six guitar strings
"""
from dataclasses import dataclass

from config.tuner_config import NUM_STRINGS, STANDARD_TUNING


@dataclass(frozen=True)
class ReferenceString:
    """Target pitch of one open string"""
    name: str
    frequency: float
    note: str


# Ordered low to high; order only breaks ties in the nearest-string search
GUITAR_STRINGS = tuple(
    ReferenceString(name, frequency, note) for name, frequency, note in STANDARD_TUNING
)

if len(GUITAR_STRINGS) != NUM_STRINGS:
    raise ValueError(f"Expected {NUM_STRINGS} reference strings, got {len(GUITAR_STRINGS)}")
