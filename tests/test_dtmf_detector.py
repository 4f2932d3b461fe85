"""Tests for the streaming DTMF detection session."""

import numpy as np
import pytest

from dtmf_codec.core.coefficients import SILENCE
from dtmf_codec.core.dtmf_detector import DTMFDetector, DetectorConfig, ToneEvent, detect_batch
from dtmf_codec.core.interfaces import UnsupportedFormatError


class TestDetectBatch:
    def test_silence(self):
        assert detect_batch(np.zeros(102, dtype=np.int16)) == SILENCE

    def test_quiet_tone_below_power_gate(self, tone_frame):
        quiet = (tone_frame("5").astype(np.int32) >> 8).astype(np.int16)
        assert detect_batch(quiet) == SILENCE

    @pytest.mark.parametrize("symbol", list("159D"))
    def test_tone(self, tone_frame, symbol):
        assert detect_batch(tone_frame(symbol)) == symbol


class TestDTMFDetector:
    def test_rejects_other_sample_rates(self):
        with pytest.raises(UnsupportedFormatError):
            DTMFDetector(DetectorConfig(sample_rate=16000))

    def test_silence_yields_nothing(self):
        detector = DTMFDetector()
        assert detector.process(np.zeros(1000, dtype=np.int16)) == []
        assert detector.result == ""

    def test_held_tone_reported_once(self, tone_frame):
        detector = DTMFDetector()
        frame = tone_frame("5")
        events = []
        for _ in range(10):
            events.extend(detector.process(frame))
        assert [e.symbol for e in events] == ["5"]
        assert events[0] == ToneEvent(symbol="5", batch_index=0, sample_offset=0)

    def test_tone_after_silence_reported_again(self, tone_frame):
        detector = DTMFDetector()
        frame = tone_frame("5")
        silence = np.zeros(102, dtype=np.int16)
        for batch in (frame, frame, silence, frame):
            detector.process(batch)
        assert detector.result == "55"
        assert [e.batch_index for e in detector.events] == [0, 3]
        assert detector.events[1].sample_offset == 306

    def test_partial_batch_buffered(self, tone_frame):
        detector = DTMFDetector()
        frame = tone_frame("7")
        assert detector.process(frame[:60]) == []
        events = detector.process(frame[60:])
        assert [e.symbol for e in events] == ["7"]

    def test_chunk_size_does_not_change_result(self, dial):
        samples = dial("147*2580369#ABCD")
        reference = DTMFDetector()
        reference.process(samples)

        for chunk_size in (1, 7, 101, 102, 103, 160, 1000):
            detector = DTMFDetector()
            for start in range(0, len(samples), chunk_size):
                detector.process(samples[start:start + chunk_size])
            assert detector.result == reference.result
            assert detector.events == reference.events

    def test_callback(self, tone_frame):
        received = []
        detector = DTMFDetector(on_tone=received.append)
        detector.process(tone_frame("#"))
        assert [e.symbol for e in received] == ["#"]

    def test_clear_result_keeps_debounce_state(self, tone_frame):
        detector = DTMFDetector()
        frame = tone_frame("3")
        detector.process(frame)
        detector.clear_result()
        assert detector.result == ""
        assert detector.process(frame) == []
        assert detector.last_symbol == "3"

    def test_reset(self, tone_frame):
        detector = DTMFDetector()
        frame = tone_frame("3")
        detector.process(frame)
        detector.process(frame[:50])
        detector.reset()
        assert detector.get_debug_info()['buffered_samples'] == 0
        events = detector.process(frame)
        assert [(e.symbol, e.batch_index) for e in events] == [("3", 0)]

    def test_debug_info(self, tone_frame):
        detector = DTMFDetector()
        detector.process(np.concatenate([tone_frame("0"), np.zeros(150, dtype=np.int16)]))
        info = detector.get_debug_info()
        assert info['batches_processed'] == 2
        assert info['tone_batches'] == 1
        assert info['tones_detected'] == 1
        assert info['buffered_samples'] == 48
        assert info['last_symbol'] == SILENCE

    def test_failing_callback_keeps_session_consistent(self, tone_frame):
        calls = []

        def broken(event):
            calls.append(event.symbol)
            raise RuntimeError("callback failure")

        detector = DTMFDetector(on_tone=broken)
        frame = tone_frame("5")
        events = detector.process(np.concatenate([frame, frame, frame[:50]]))
        assert [e.symbol for e in events] == ["5"]
        assert detector.get_debug_info()['batches_processed'] == 2
        assert detector.get_debug_info()['buffered_samples'] == 50

        assert detector.process(frame) == []
        assert detector.result == "5"
        assert detector.get_debug_info()['batches_processed'] == 3
        assert calls == ["5"]

    def test_callback_runs_after_chunk_is_buffered(self, tone_frame):
        seen = []
        detector = DTMFDetector()
        detector.on_tone = lambda event: seen.append(detector.get_debug_info()['buffered_samples'])
        frame = tone_frame("8")
        detector.process(np.concatenate([frame, frame[:30]]))
        assert seen == [30]
