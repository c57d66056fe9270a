# Standard guitar tuning (E A D G B E), low to high
STANDARD_TUNING = [
    ('6th string', 82.41, 'E2'),   # Low E
    ('5th string', 110.00, 'A2'),
    ('4th string', 146.83, 'D3'),
    ('3rd string', 196.00, 'G3'),
    ('2nd string', 246.94, 'B3'),
    ('1st string', 329.63, 'E4'),  # High E
]

NUM_STRINGS = 6

# Audio input: mono, signed 16-bit little-endian PCM
SAMPLE_RATE = 44100
CHANNELS = 1
BYTES_PER_SAMPLE = 2

# Analysis window (samples) ~93 ms @ 44.1 kHz, 8192 raw bytes
WINDOW_SIZE = 4096

# Usable pitch range (Hz), both bounds exclusive
MIN_FREQUENCY = 50.0
MAX_FREQUENCY = 2000.0

# Maximum deviation still considered in tune (in cents)
TOLERANCE_CENTS = 5.0

# Meter
METER_WIDTH = 50

# Reference pitch for note conversions
A4_FREQUENCY = 440.0

# YIN estimator (librosa)
YIN_THRESHOLD = 0.1
YIN_FRAME_LENGTH = 2048
YIN_HOP_LENGTH = 512
SILENCE_RMS = 0.005  # Windows quieter than this are treated as no pitch

# CREPE estimator
CREPE_MODEL_CAPACITY = 'tiny'
CREPE_STEP_SIZE = 10  # ms
CREPE_CONFIDENCE_THRESHOLD = 0.5

# File replay
FILE_CHUNK_BYTES = 2048

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
