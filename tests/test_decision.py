"""Tests for the per-batch DTMF decision."""

import numpy as np
import pytest

from dtmf_codec.core.coefficients import DTMF_SYMBOLS, SILENCE, SYMBOL_TABLE
from dtmf_codec.core.decision import POWER_THRESHOLD, decide, has_power, mean_amplitude


def _magnitudes(row: int, column: int, level: int = 1000, floor: int = 1) -> list:
    mags = [floor] * 18
    mags[row] = level
    mags[4 + column] = level
    return mags


class TestDecide:
    def test_clear_tone(self):
        assert decide(_magnitudes(0, 0)) == "1"

    def test_every_pair_maps_to_one_symbol(self):
        symbols = [decide(_magnitudes(row, column)) for row in range(4) for column in range(4)]
        assert symbols == list(DTMF_SYMBOLS)
        assert len(set(symbols)) == 16

    def test_twist_rejected(self):
        mags = [1] * 18
        mags[0] = 100
        mags[5] = 500
        assert decide(mags) == SILENCE

    def test_reverse_twist_rejected(self):
        mags = [1] * 18
        mags[0] = 1000
        mags[5] = 300
        assert decide(mags) == SILENCE

    def test_zero_magnitudes(self):
        assert decide([0] * 18) == SILENCE

    def test_zero_other_bins_substituted(self):
        mags = [0] * 18
        mags[1] = 1000
        mags[6] = 1000
        assert decide(mags) == "6"

    def test_negative_magnitudes_do_not_crash(self):
        assert decide([-5] * 18) == SILENCE

    def test_weak_tone_rejected(self):
        assert decide(_magnitudes(2, 2, level=20, floor=10)) == SILENCE

    def test_strong_harmonic_rejected(self):
        mags = _magnitudes(3, 1)
        mags[12] = 100
        assert decide(mags) == SILENCE

    def test_loose_first_column(self):
        """The first column tolerates a neighbour at a third of its level."""
        mags = [1] * 18
        mags[0] = 2000
        mags[4] = 1000
        mags[5] = 300
        assert decide(mags) == "1"

    def test_other_columns_are_strict(self):
        mags = [1] * 18
        mags[0] = 2000
        mags[5] = 1000
        mags[6] = 300
        assert decide(mags) == SILENCE

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            decide([1] * 17)

    def test_symbol_table_shape(self):
        assert [len(row) for row in SYMBOL_TABLE] == [4, 4, 4, 4]


class TestPowerGate:
    def test_threshold(self):
        assert not has_power(np.full(102, POWER_THRESHOLD - 1, dtype=np.int16))
        assert has_power(np.full(102, POWER_THRESHOLD, dtype=np.int16))

    def test_mean_uses_absolute_values(self):
        batch = np.array([-400, 400] * 51, dtype=np.int16)
        assert mean_amplitude(batch) == 400

    def test_extreme_sample(self):
        batch = np.full(102, -32768, dtype=np.int16)
        assert mean_amplitude(batch) == 32768
