"""Tests for PCM decoding and AU file support."""

import struct

import numpy as np
import pytest

from dtmf_codec.core.interfaces import SampleFormatError, UnsupportedFormatError
from dtmf_codec.sources.au_file import (
    AU_UNKNOWN_SIZE,
    AUFileSource,
    decode_au,
    encode_au,
    parse_header,
    write_au,
)
from dtmf_codec.sources.pcm import decode_pcm16, decode_samples, encode_pcm16, promote_8bit


def _au(payload: bytes, encoding: int = 3, rate: int = 8000, channels: int = 1,
        little: bool = False, size: int = None, offset: int = 24) -> bytes:
    if size is None:
        size = len(payload)
    if little:
        header = b"dns." + struct.pack("<5I", offset, size, encoding, rate, channels)
    else:
        header = b".snd" + struct.pack(">5I", offset, size, encoding, rate, channels)
    return header + b"\x00" * (offset - 24) + payload


class TestPCM:
    def test_little_endian(self):
        assert decode_pcm16(b"\x01\x00\xff\xff").tolist() == [1, -1]

    def test_big_endian(self):
        assert decode_pcm16(b"\x00\x01\x80\x00", "big").tolist() == [1, -32768]

    def test_encode(self):
        samples = np.array([1, -2], dtype=np.int16)
        assert encode_pcm16(samples) == b"\x01\x00\xfe\xff"
        assert encode_pcm16(samples, "big") == b"\x00\x01\xff\xfe"

    def test_odd_length(self):
        with pytest.raises(SampleFormatError):
            decode_pcm16(b"\x00\x01\x02")

    def test_unknown_byteorder(self):
        with pytest.raises(UnsupportedFormatError):
            decode_pcm16(b"\x00\x00", "middle")

    def test_promote_8bit(self):
        promoted = promote_8bit(bytes([1, 0xFF, 0x80]))
        assert promoted.dtype == np.int16
        assert promoted.tolist() == [256, -256, -32768]

    def test_unsupported_width(self):
        with pytest.raises(UnsupportedFormatError):
            decode_samples(b"\x00" * 6, sample_width=3)


class TestAUHeader:
    def test_big_endian_header(self):
        header = parse_header(_au(b""))
        assert header.byteorder == "big"
        assert header.sample_width == 2
        assert (header.data_offset, header.sample_rate, header.channels) == (24, 8000, 1)

    def test_reversed_magic(self):
        header = parse_header(_au(b"", little=True))
        assert header.byteorder == "little"
        assert header.sample_rate == 8000

    def test_bad_magic(self):
        with pytest.raises(UnsupportedFormatError):
            parse_header(b"RIFF" + b"\x00" * 20)

    def test_truncated(self):
        with pytest.raises(UnsupportedFormatError):
            parse_header(b".snd")


class TestDecodeAU:
    def test_16bit_big_endian(self):
        _, samples = decode_au(_au(b"\x00\x01\xff\xff"))
        assert samples.tolist() == [1, -1]

    def test_16bit_little_endian(self):
        _, samples = decode_au(_au(b"\x01\x00\xff\xff", little=True))
        assert samples.tolist() == [1, -1]

    def test_8bit_promoted(self):
        _, samples = decode_au(_au(bytes([2, 0xFE]), encoding=2))
        assert samples.tolist() == [512, -512]

    def test_data_offset_and_size(self):
        data = _au(b"\x00\x05\x00\x06\x00\x07", offset=32, size=4)
        _, samples = decode_au(data)
        assert samples.tolist() == [5, 6]

    def test_unknown_size_reads_to_end(self):
        _, samples = decode_au(_au(b"\x00\x05\x00\x06", size=AU_UNKNOWN_SIZE))
        assert samples.tolist() == [5, 6]

    @pytest.mark.parametrize("kwargs", [
        {"encoding": 1},
        {"rate": 16000},
        {"channels": 2},
    ])
    def test_unsupported_format(self, kwargs):
        with pytest.raises(UnsupportedFormatError):
            decode_au(_au(b"\x00\x00", **kwargs))

    def test_encode_round_trip(self):
        samples = np.array([0, 1000, -1000, 32767, -32768], dtype=np.int16)
        data = encode_au(samples)
        assert data[:4] == b".snd"
        header, decoded = decode_au(data)
        assert header.encoding == 3
        assert decoded.tolist() == samples.tolist()


class TestAUFileSource:
    def test_read_in_chunks(self, tmp_path):
        path = tmp_path / "tones.au"
        samples = np.arange(10, dtype=np.int16)
        assert write_au(path, samples) == 24 + 20

        with AUFileSource(path) as source:
            assert source.sample_rate == 8000
            chunks = [chunk.tolist() for chunk in source.iter_chunks(4)]
        assert chunks == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]

    def test_exhausted_source(self, tmp_path):
        path = tmp_path / "empty.au"
        write_au(path, np.zeros(0, dtype=np.int16))
        source = AUFileSource(path)
        assert source.read_samples(10) is None
        source.close()
        assert source.read_samples(10) is None

    def test_rejects_unsupported_file(self, tmp_path):
        path = tmp_path / "stereo.au"
        path.write_bytes(_au(b"\x00\x00\x00\x00", channels=2))
        with pytest.raises(UnsupportedFormatError):
            AUFileSource(path)
