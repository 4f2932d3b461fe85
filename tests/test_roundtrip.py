"""Generate-then-detect tests over the full keypad."""

import pytest

from dtmf_codec.core.coefficients import DTMF_SYMBOLS
from dtmf_codec.core.dtmf_detector import DTMFDetector
from dtmf_codec.core.dtmf_generator import DTMFGenerator, GeneratorConfig, generate_sequence


class TestRoundTrip:
    def test_all_symbols_frame_by_frame(self):
        """Frames go straight from the generator into the detector."""
        generator = DTMFGenerator(GeneratorConfig(frame_size=160, tone_ms=40, pause_ms=20))
        detector = DTMFDetector()

        assert generator.submit(DTMF_SYMBOLS)
        while not generator.ready:
            detector.process(generator.generate_frame())

        assert detector.result == DTMF_SYMBOLS

    def test_repeated_runs(self):
        generator = DTMFGenerator(GeneratorConfig(frame_size=160, tone_ms=40, pause_ms=20))
        detector = DTMFDetector()

        for _ in range(3):
            generator.reset()
            detector.clear_result()
            generator.submit(DTMF_SYMBOLS)
            for frame in generator.stream():
                detector.process(frame)
            assert detector.result == DTMF_SYMBOLS

    @pytest.mark.parametrize("symbol", list(DTMF_SYMBOLS))
    def test_single_symbol_default_timing(self, symbol):
        detector = DTMFDetector()
        detector.process(generate_sequence(symbol))
        assert detector.result == symbol

    def test_repeated_digit(self, dial):
        detector = DTMFDetector()
        detector.process(dial("1100"))
        assert detector.result == "1100"

    def test_long_sequence(self, dial):
        digits = "0123456789*#ABCD" * 2
        detector = DTMFDetector()
        detector.process(dial(digits))
        assert detector.result == digits
