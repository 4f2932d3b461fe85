"""Tests for the async streaming front end."""

import numpy as np
import pytest

from dtmf_codec.core.audio_processor import AudioConfig, AudioProcessingError, AudioProcessor
from dtmf_codec.core.interfaces import UnsupportedFormatError
from dtmf_codec.sources.pcm import encode_pcm16


class TestAudioProcessorConfig:
    def test_rejects_stereo(self):
        with pytest.raises(UnsupportedFormatError):
            AudioProcessor(AudioConfig(channels=2))

    def test_rejects_wide_samples(self):
        with pytest.raises(UnsupportedFormatError):
            AudioProcessor(AudioConfig(sample_width=4))


class TestAudioProcessor:
    @pytest.mark.asyncio
    async def test_unaligned_chunks(self, dial):
        data = encode_pcm16(dial("2468"))
        processor = AudioProcessor()
        events = []
        for start in range(0, len(data), 333):
            events.extend(await processor.process_chunk(data[start:start + 333]))
        assert "".join(e.symbol for e in events) == "2468"
        assert processor.digits == "2468"

    @pytest.mark.asyncio
    async def test_big_endian_stream(self, dial):
        processor = AudioProcessor(AudioConfig(byteorder="big"))
        await processor.process_chunk(encode_pcm16(dial("C"), "big"))
        assert processor.digits == "C"

    @pytest.mark.asyncio
    async def test_8bit_stream(self, dial):
        samples = (dial("9").astype(np.int32) >> 8).astype(np.int8)
        processor = AudioProcessor(AudioConfig(sample_width=1))
        await processor.process_chunk(samples.tobytes())
        assert processor.digits == "9"

    @pytest.mark.asyncio
    async def test_subscribers_notified(self, dial):
        processor = AudioProcessor()
        received = []

        async def on_tone(event):
            received.append(event.symbol)

        await processor.subscribe_dtmf(on_tone)
        await processor.process_chunk(encode_pcm16(dial("01")))
        await processor.unsubscribe_dtmf(on_tone)
        await processor.process_chunk(encode_pcm16(dial("2")))

        assert received == ["0", "1"]
        info = await processor.get_debug_info()
        assert info['subscriber_notifications'] == 2
        assert info['dtmf_events'] == 3

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_stop_processing(self, dial):
        processor = AudioProcessor()

        async def broken(event):
            raise RuntimeError("subscriber failure")

        await processor.subscribe_dtmf(broken)
        events = await processor.process_chunk(encode_pcm16(dial("5")))
        assert [e.symbol for e in events] == ["5"]

    @pytest.mark.asyncio
    async def test_decode_failure_wrapped(self):
        processor = AudioProcessor(AudioConfig(byteorder="middle"))
        with pytest.raises(AudioProcessingError):
            await processor.process_chunk(b"\x00\x00")
        info = await processor.get_debug_info()
        assert info['processing_errors'] == 1

    @pytest.mark.asyncio
    async def test_reset(self, dial):
        processor = AudioProcessor()
        await processor.process_chunk(encode_pcm16(dial("3"))[:-1])
        assert (await processor.get_debug_info())['pending_bytes'] == 1
        processor.reset()
        info = await processor.get_debug_info()
        assert info['pending_bytes'] == 0
        assert processor.digits == ""

    @pytest.mark.asyncio
    async def test_digit_history_is_bounded(self, dial):
        processor = AudioProcessor(history_size=3)
        events = await processor.process_chunk(encode_pcm16(dial("12345")))
        assert "".join(e.symbol for e in events) == "12345"
        assert processor.digits == "345"
        assert processor.dtmf_detector.events == []
