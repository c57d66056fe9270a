"""
Note name <-> frequency conversions (12-TET, A4 = 440 Hz)
"""
import math

from config.tuner_config import A4_FREQUENCY

NOTE_NAMES = ['C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B']

# Semitones from C0 to A4
A4_INDEX = NOTE_NAMES.index('A') + 4 * 12


class InvalidNoteError(ValueError):
    """Raised for note names that are not a pitch class followed by an octave digit"""


def note_to_frequency(note: str) -> float:
    """
    Convert a note name such as 'E2' or 'F#3' to its frequency

    Args:
        note: Pitch class (sharps only) followed by a single octave digit

    Returns:
        Frequency in Hz
    """
    if not isinstance(note, str) or len(note) < 2 or not note[-1].isdigit():
        raise InvalidNoteError(f"Invalid note: {note!r}")

    name, octave = note[:-1], int(note[-1])
    if name not in NOTE_NAMES:
        raise InvalidNoteError(f"Invalid note: {note!r}")

    half_steps = NOTE_NAMES.index(name) + octave * 12 - A4_INDEX
    return A4_FREQUENCY * (2 ** (half_steps / 12))


def frequency_to_note(frequency: float) -> str:
    """Name of the equal-tempered note nearest to frequency"""
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")

    half_steps = round(12 * math.log2(frequency / A4_FREQUENCY))
    index = half_steps + A4_INDEX
    return f"{NOTE_NAMES[index % 12]}{index // 12}"
