import pytest

from tuner.tuning.notes import InvalidNoteError, frequency_to_note, note_to_frequency


def test_a4_is_440():
    assert note_to_frequency('A4') == 440.0
    assert frequency_to_note(440.0) == 'A4'


def test_round_trip():
    for note in ['E2', 'A2', 'D3', 'G3', 'B3', 'E4', 'C4', 'F#3', 'A#0', 'C8']:
        assert frequency_to_note(note_to_frequency(note)) == note


def test_guitar_strings():
    assert note_to_frequency('E2') == pytest.approx(82.41, abs=0.01)
    assert note_to_frequency('E4') == pytest.approx(329.63, abs=0.01)
    assert frequency_to_note(82.41) == 'E2'
    assert frequency_to_note(246.94) == 'B3'


def test_nearest_note_rounding():
    # 40 cents sharp of A4 still rounds to A4, 60 cents to A#4
    assert frequency_to_note(440.0 * 2 ** (40 / 1200)) == 'A4'
    assert frequency_to_note(440.0 * 2 ** (60 / 1200)) == 'A#4'


def test_octave_boundary():
    assert note_to_frequency('C4') == pytest.approx(261.63, abs=0.01)
    assert frequency_to_note(261.63) == 'C4'
    assert frequency_to_note(246.94) == 'B3'


@pytest.mark.parametrize('note', ['', 'A', '4', 'H4', 'Bb3', 'a4', 'A#', 'E2x', None])
def test_invalid_note(note):
    with pytest.raises(InvalidNoteError, match='Invalid note'):
        note_to_frequency(note)


def test_invalid_note_is_a_value_error():
    assert issubclass(InvalidNoteError, ValueError)


@pytest.mark.parametrize('frequency', [0.0, -440.0])
def test_non_positive_frequency(frequency):
    with pytest.raises(ValueError):
        frequency_to_note(frequency)
