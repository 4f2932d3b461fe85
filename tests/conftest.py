"""Shared test fixtures and helpers."""

import numpy as np
import pytest

from dtmf_codec.core.dtmf_generator import DTMFGenerator, GeneratorConfig, generate_sequence
from dtmf_codec.utils.config import Config


@pytest.fixture(autouse=True)
def fresh_config():
    """Give every test its own configuration singleton."""
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture
def tone_frame():
    """Return the first tone frame of a symbol, ``frame_size`` samples long."""

    def _tone_frame(symbol: str, frame_size: int = 102) -> np.ndarray:
        generator = DTMFGenerator(GeneratorConfig(frame_size=frame_size))
        assert generator.submit(symbol)
        return generator.generate_frame()

    return _tone_frame


@pytest.fixture
def dial():
    """Synthesize a whole symbol sequence with short tones and pauses."""

    def _dial(symbols: str, tone_ms: int = 40, pause_ms: int = 20) -> np.ndarray:
        config = GeneratorConfig(frame_size=160, tone_ms=tone_ms, pause_ms=pause_ms)
        return generate_sequence(symbols, config)

    return _dial
