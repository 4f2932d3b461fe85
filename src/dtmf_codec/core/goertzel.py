# src/dtmf_codec/core/goertzel.py
"""
Fixed-point Goertzel filter bank.

Each call runs the recurrence v[n] = x[n] + 2*coeff*v[n-1] - v[n-2] over one
batch starting from zero state. Nothing is carried over between batches: the
decision thresholds are tuned for block-based filtering.
"""

from typing import List, Sequence, Tuple

from .coefficients import COEFF_NUMBER, DETECTOR_COEFFICIENTS

# Right shift applied to the accumulators before the magnitude products
MAGNITUDE_SCALE_SHIFT = 10


def wrap32(value: int) -> int:
    """Truncate an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def wrap16(value: int) -> int:
    """Truncate an integer to a signed 16-bit value."""
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def mpy48sr(o16: int, o32: int) -> int:
    """
    Multiply a 16-bit by a 32-bit fixed-point value, keeping the upper 32 bits.

    The low half is rounded to nearest before being folded into the shifted
    high half product.
    """
    low = (((o32 & 0xFFFF) * o16) + 0x4000) >> 15
    high = (o32 >> 16) * o16
    return wrap32((high << 1) + low)


def _magnitude(coefficient: int, prev: int, prev_prev: int) -> int:
    cross = wrap16(mpy48sr(coefficient, wrap32(prev << 1))) * wrap16(prev_prev)
    prev = wrap16(prev)
    prev_prev = wrap16(prev_prev)
    return wrap32(prev * prev + prev_prev * prev_prev - cross)


def goertzel_filter(coeff_a: int, coeff_b: int, samples: Sequence[int]) -> Tuple[int, int]:
    """
    Run two Goertzel filters over one batch.

    Args:
        coeff_a: Coefficient of the first frequency
        coeff_b: Coefficient of the second frequency
        samples: Normalized batch as plain integers

    Returns:
        Magnitudes of both frequencies
    """
    prev_a = prev_prev_a = prev_b = prev_prev_b = 0

    for sample in samples:
        out_a = wrap32(mpy48sr(coeff_a, wrap32(prev_a << 1)) - prev_prev_a + sample)
        out_b = wrap32(mpy48sr(coeff_b, wrap32(prev_b << 1)) - prev_prev_b + sample)
        prev_prev_a, prev_prev_b = prev_a, prev_b
        prev_a, prev_b = out_a, out_b

    prev_a >>= MAGNITUDE_SCALE_SHIFT
    prev_prev_a >>= MAGNITUDE_SCALE_SHIFT
    prev_b >>= MAGNITUDE_SCALE_SHIFT
    prev_prev_b >>= MAGNITUDE_SCALE_SHIFT

    return (_magnitude(coeff_a, prev_a, prev_prev_a),
            _magnitude(coeff_b, prev_b, prev_prev_b))


def filter_bank(samples: Sequence[int],
                coefficients: Sequence[int] = DETECTOR_COEFFICIENTS) -> List[int]:
    """Compute all 18 magnitudes of a normalized batch, in coefficient order."""
    if len(coefficients) != COEFF_NUMBER:
        raise ValueError(f"Expected {COEFF_NUMBER} coefficients, got {len(coefficients)}")

    samples = [int(sample) for sample in samples]
    magnitudes: List[int] = []
    for index in range(0, COEFF_NUMBER, 2):
        magnitudes.extend(goertzel_filter(coefficients[index], coefficients[index + 1], samples))
    return magnitudes
