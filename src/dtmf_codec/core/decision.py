# src/dtmf_codec/core/decision.py
"""
DTMF decision procedure.
Turns the 18 Goertzel magnitudes of one batch into a keypad symbol or silence
through a chain of early-exit rejection tests: dominance over the other dial
tone bins, twist, harmonic content and cross-tone leakage.
"""

from typing import List, Sequence

import numpy as np

from .coefficients import (
    COEFF_NUMBER,
    PRIMARY_COUNT,
    ROW_COUNT,
    COLUMN_COUNT,
    SILENCE,
    SYMBOL_TABLE,
)
from .goertzel import wrap32

# Minimum mean absolute amplitude of a batch worth filtering
POWER_THRESHOLD = 328
# Required ratio of the chosen tones over each harmonic guard bin
DIAL_TONES_TO_OTHER_TONES = 16
# Required ratio of the chosen tones over the other dial tone bins
DIAL_TONES_TO_OTHER_DIAL_TONES = 6

# The 1176 Hz column bin leaks more into its neighbours
LOOSE_COLUMN = ROW_COUNT
LOOSE_COLUMN_RATIO = DIAL_TONES_TO_OTHER_DIAL_TONES // 3


def _ratio(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _peak(magnitudes: Sequence[int], start: int, stop: int) -> int:
    # Ties keep the lower index; nothing above zero keeps ``start``
    index, best = start, 0
    for i in range(start, stop):
        if best < magnitudes[i]:
            index, best = i, magnitudes[i]
    return index


def mean_amplitude(batch: np.ndarray) -> int:
    """Mean absolute sample value of a batch, truncated."""
    samples = np.asarray(batch, dtype=np.int32)
    return int(np.abs(samples).sum()) // len(samples)


def has_power(batch: np.ndarray) -> bool:
    """Power gate: whether the batch is loud enough to hold a tone."""
    return mean_amplitude(batch) >= POWER_THRESHOLD


def decide(magnitudes: Sequence[int]) -> str:
    """
    Pick the keypad symbol present in a batch.

    Args:
        magnitudes: The 18 filter bank magnitudes of one batch

    Returns:
        One of the 16 DTMF symbols, or SILENCE
    """
    if len(magnitudes) != COEFF_NUMBER:
        raise ValueError(f"Expected {COEFF_NUMBER} magnitudes, got {len(magnitudes)}")

    mags: List[int] = [int(m) for m in magnitudes]

    row = _peak(mags, 0, ROW_COUNT)
    column = _peak(mags, ROW_COUNT, ROW_COUNT + COLUMN_COUNT)

    baseline = wrap32(sum(mags[:PRIMARY_COUNT]) - mags[row] - mags[column]) >> 3
    if not baseline:
        baseline = 1

    # Both tones must stand out from the remaining dial tone bins
    if _ratio(mags[row], baseline) < DIAL_TONES_TO_OTHER_DIAL_TONES:
        return SILENCE
    if _ratio(mags[column], baseline) < DIAL_TONES_TO_OTHER_DIAL_TONES:
        return SILENCE

    # Twist; normal and reverse limits differ
    if mags[row] < (mags[column] >> 2):
        return SILENCE
    if mags[column] < ((mags[row] >> 1) - (mags[row] >> 3)):
        return SILENCE

    mags = [m if m else 1 for m in mags]

    for guard in mags[PRIMARY_COUNT:]:
        if _ratio(mags[row], guard) < DIAL_TONES_TO_OTHER_TONES:
            return SILENCE
        if _ratio(mags[column], guard) < DIAL_TONES_TO_OTHER_TONES:
            return SILENCE

    column_ratio = LOOSE_COLUMN_RATIO if column == LOOSE_COLUMN else DIAL_TONES_TO_OTHER_DIAL_TONES
    for other in mags[:PRIMARY_COUNT]:
        # Bins are skipped by value, so a bin equal to a chosen tone is skipped too
        if other == mags[column] or other == mags[row]:
            continue
        if _ratio(mags[row], other) < DIAL_TONES_TO_OTHER_DIAL_TONES:
            return SILENCE
        if _ratio(mags[column], other) < column_ratio:
            return SILENCE

    return SYMBOL_TABLE[row][column - ROW_COUNT]
