# src/dtmf_codec/core/normalizer.py
"""Batch normalization ahead of fixed-point filtering."""

import numpy as np

# Value the sign-bit scan starts from; an all-zero batch keeps it
NORM_DEFAULT = 32
NORM_TARGET = 16


def norm_l(value: int) -> int:
    """Number of redundant sign bits of a signed 32-bit value."""
    if value == 0:
        return 0
    if value < 0:
        value = ~value
    return 31 - value.bit_length()


def normalization_shift(batch: np.ndarray) -> int:
    """
    Shift that brings the loudest sample of a batch just below full scale.

    Negative results mean a right shift. An all-zero batch yields 16.
    """
    samples = np.asarray(batch, dtype=np.int32)
    nonzero = samples[samples != 0]
    if nonzero.size == 0:
        return NORM_DEFAULT - NORM_TARGET

    # norm_l decreases with magnitude, so the loudest sample gives the minimum
    magnitudes = np.where(nonzero < 0, ~nonzero, nonzero)
    min_norm = 31 - int(magnitudes.max()).bit_length()
    return min_norm - NORM_TARGET


def normalize(batch: np.ndarray) -> np.ndarray:
    """Rescale a batch to use the full 16-bit range, truncating to int16."""
    samples = np.asarray(batch, dtype=np.int32)
    shift = normalization_shift(samples)
    if shift >= 0:
        scaled = samples << shift
    else:
        scaled = samples >> -shift
    return scaled.astype(np.int16)
