# src/dtmf_codec/core/oscillator.py
"""
Recursive fixed-point sine oscillators.

The generator reuses the Goertzel recurrence without an input term,
y[n] = 2*coeff*y[n-1] - y[n-2], run forward one sample at a time with its
state carried through a whole tone segment.
"""

from typing import Tuple

import numpy as np

from .coefficients import OSCILLATOR_SEED
from .goertzel import mpy48sr, wrap32

INT16_MIN = -32768
INT16_MAX = 32767


def oscillator_step(coefficient: int, prev: int, prev_prev: int) -> Tuple[int, Tuple[int, int]]:
    """
    Advance a resonator by one sample.

    Returns:
        The new output and the updated (prev, prev_prev) state
    """
    value = wrap32(mpy48sr(coefficient, wrap32(prev << 1)) - prev_prev)
    return value, (value, prev)


class Oscillator:
    """Single-frequency two-pole resonator"""

    def __init__(self, coefficient: int = 0, prev: int = 0, prev_prev: int = 0):
        self.coefficient = coefficient
        self.prev = prev
        self.prev_prev = prev_prev

    @property
    def active(self) -> bool:
        return self.coefficient != 0

    def start(self, coefficient: int) -> None:
        """Seed the resonator for a new tone segment"""
        self.coefficient = coefficient
        self.prev = coefficient
        self.prev_prev = OSCILLATOR_SEED if coefficient else 0

    def silence(self) -> None:
        self.coefficient = 0
        self.prev = 0
        self.prev_prev = 0

    def step(self) -> int:
        value, (self.prev, self.prev_prev) = oscillator_step(self.coefficient, self.prev, self.prev_prev)
        return value

    def __repr__(self) -> str:
        return f"Oscillator(coefficient={self.coefficient}, prev={self.prev}, prev_prev={self.prev_prev})"


def mix(row: Oscillator, column: Oscillator, count: int) -> np.ndarray:
    """
    Sum two oscillators into ``count`` int16 samples.

    The sum is halved when both oscillators run, so a full-scale dual tone
    stays within the 16-bit range.
    """
    halve = row.active and column.active
    out = np.empty(count, dtype=np.int16)
    for i in range(count):
        total = row.step() + column.step()
        if halve:
            total >>= 1
        out[i] = min(max(total, INT16_MIN), INT16_MAX)
    return out
