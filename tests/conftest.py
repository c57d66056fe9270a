import importlib
import sys
import types
import wave

import numpy as np
import pytest


# Imported against the fake library, so never left behind for other tests
FAKE_BOUND_MODULES = ('tuner.audio.microphone', 'main')


class FakeRawInputStream:
    """Stands in for sounddevice.RawInputStream; tests drive the callbacks"""

    instances = []

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.started = False
        self.closed = False
        FakeRawInputStream.instances.append(self)

    def start(self):
        self.started = True

    def close(self, ignore_errors=True):
        self.closed = True


def make_fake_sounddevice():
    module = types.ModuleType('sounddevice')
    module.PortAudioError = type('PortAudioError', (Exception,), {})
    module.CallbackAbort = type('CallbackAbort', (Exception,), {})
    module.CallbackStop = type('CallbackStop', (Exception,), {})
    module.RawInputStream = FakeRawInputStream
    module.query_devices = lambda: [
        {'name': 'Built-in Microphone', 'max_input_channels': 1, 'default_samplerate': 44100.0},
        {'name': 'Speakers', 'max_input_channels': 0, 'default_samplerate': 48000.0},
    ]
    return module


@pytest.fixture
def fake_sounddevice(monkeypatch):
    """Replace sounddevice so capture code runs without PortAudio or hardware"""
    FakeRawInputStream.instances = []
    module = make_fake_sounddevice()
    monkeypatch.setitem(sys.modules, 'sounddevice', module)

    # Modules that imported the real library must be re-imported against the fake
    for name in FAKE_BOUND_MODULES:
        monkeypatch.delitem(sys.modules, name, raising=False)

    yield module

    for name in FAKE_BOUND_MODULES:
        sys.modules.pop(name, None)


@pytest.fixture
def microphone(fake_sounddevice):
    return importlib.import_module('tuner.audio.microphone')


@pytest.fixture
def main_module(fake_sounddevice):
    return importlib.import_module('main')


@pytest.fixture
def write_tone(tmp_path):
    """Write a mono 16-bit sine wave file and return its path"""
    def write(seconds=0.5, frequency=110.0, sample_rate=44100, name='tone.wav'):
        path = tmp_path / name
        t = np.arange(int(sample_rate * seconds)) / sample_rate
        samples = (0.5 * 32767 * np.sin(2 * np.pi * frequency * t)).astype('<i2')

        with wave.open(str(path), 'wb') as f:
            f.setnchannels(1)
            f.setsampwidth(2)
            f.setframerate(sample_rate)
            f.writeframes(samples.tobytes())

        return path

    return write
