# src/dtmf_codec/core/coefficients.py
"""
Fixed-point coefficient tables shared by the DTMF detector and generator.

Every coefficient is cos(2*pi*f/8000) scaled by 32768, i.e. 2*cos(w) in Q14;
the recurrences double it by shifting their 32-bit operand left by one.
"""

from typing import Optional, Tuple

import numpy as np

SAMPLE_RATE = 8000
SAMPLES_PER_MS = SAMPLE_RATE // 1000

# Number of samples the detector filters as one unit
BATCH_SIZE = 102

COEFF_NUMBER = 18
ROW_COUNT = 4
COLUMN_COUNT = 4
# Magnitudes 0..9 are the "dial tone" bins, 10..17 the harmonic guards
PRIMARY_COUNT = 10

# Detector frequencies sit off the nominal DTMF tones
# so that harmonics of the guard frequencies line up with them.
DETECTOR_COEFFICIENTS: Tuple[int, ...] = (
    27860,   # 706 Hz  (row 697)
    26745,   # 784 Hz  (row 770)
    25529,   # 863 Hz  (row 852)
    24216,   # 941 Hz  (row 941)
    19747,   # 1176 Hz (column 1209)
    16384,   # 1333 Hz (column 1336)
    12773,   # 1490 Hz (column 1477)
    8967,    # 1647 Hz (column 1633)
    21319,   # 1098 Hz
    29769,   # 549 Hz, a third of 1633 Hz
    32706,   # 78 Hz, a common subharmonic of most bins above
    32210,   # 235 Hz
    31778,   # 314 Hz
    31226,   # 392 Hz
    -1009,   # 2039 Hz
    -12772,  # 2510 Hz, 8 * 314 Hz
    -22811,  # 2980 Hz, 2 * 1490 Hz
    -30555,  # 3529 Hz, 3 * 1176 Hz
)

# Generator oscillators run on the nominal DTMF frequencies
ROW_FREQUENCIES: Tuple[int, ...] = (697, 770, 852, 941)
COLUMN_FREQUENCIES: Tuple[int, ...] = (1209, 1336, 1477, 1633)
GENERATOR_ROW_COEFFICIENTS: Tuple[int, ...] = (27980, 26956, 25701, 24218)
GENERATOR_COLUMN_COEFFICIENTS: Tuple[int, ...] = (19073, 16325, 13085, 9315)

# Second seed value of a freshly started oscillator; sets the tone amplitude
OSCILLATOR_SEED = 31000

SILENCE = " "

SYMBOL_TABLE: Tuple[Tuple[str, ...], ...] = (
    ("1", "2", "3", "A"),
    ("4", "5", "6", "B"),
    ("7", "8", "9", "C"),
    ("*", "0", "#", "D"),
)

DTMF_SYMBOLS = "".join("".join(row) for row in SYMBOL_TABLE)


def symbol_position(symbol: str) -> Optional[Tuple[int, int]]:
    """Return the (row, column) keypad position of a symbol, or None."""
    for row, symbols in enumerate(SYMBOL_TABLE):
        if symbol in symbols:
            return row, symbols.index(symbol)
    return None


def coefficient_to_frequency(coefficient: int, sample_rate: int = SAMPLE_RATE) -> float:
    """Frequency in Hz a fixed-point coefficient is tuned to."""
    return float(np.arccos(coefficient / 32768.0) * sample_rate / (2 * np.pi))


def frequency_to_coefficient(frequency: float, sample_rate: int = SAMPLE_RATE) -> int:
    """Fixed-point coefficient for a frequency, rounded to the nearest step."""
    return int(np.round(np.cos(2 * np.pi * frequency / sample_rate) * 32768.0))
