# src/dtmf_codec/sources/au_file.py
"""
Sun/NeXT AU file support.
Parses and validates AU headers, streams samples from AU files as a
SampleSource, and writes generated tones back out as AU.
"""

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

import numpy as np

from ..core.coefficients import SAMPLE_RATE
from ..core.interfaces import UnsupportedFormatError
from ..utils.logger import DTMFLogger
from .pcm import decode_samples, encode_pcm16

logger = DTMFLogger().get_logger(__name__)

AU_MAGIC = b".snd"
AU_MAGIC_REVERSED = b"dns."
AU_HEADER_SIZE = 24
AU_UNKNOWN_SIZE = 0xFFFFFFFF

AU_ENCODING_LINEAR_8 = 2
AU_ENCODING_LINEAR_16 = 3

SAMPLE_WIDTHS = {
    AU_ENCODING_LINEAR_8: 1,
    AU_ENCODING_LINEAR_16: 2,
}

@dataclass
class AUHeader:
    """Fields of an AU file header"""
    data_offset: int
    data_size: int
    encoding: int
    sample_rate: int
    channels: int
    byteorder: str = "big"

    @property
    def sample_width(self) -> int:
        return SAMPLE_WIDTHS.get(self.encoding, 0)

    def __str__(self) -> str:
        return (f"{self.data_offset} header bytes, {self.data_size} data bytes, "
                f"encoding type: {self.encoding}, {self.sample_rate}Hz, {self.channels} channels")


def parse_header(data: bytes) -> AUHeader:
    """
    Parse the fixed part of an AU header.

    A byte-reversed magic marks a file written in little-endian order;
    its header fields and samples are read accordingly.

    Raises:
        UnsupportedFormatError: On short data or a bad magic number
    """
    if len(data) < AU_HEADER_SIZE:
        raise UnsupportedFormatError(f"AU header truncated ({len(data)} bytes)")

    magic = data[:4]
    if magic == AU_MAGIC:
        byteorder, prefix = "big", ">"
    elif magic == AU_MAGIC_REVERSED:
        byteorder, prefix = "little", "<"
    else:
        raise UnsupportedFormatError(f"bad magic number: {magic.hex()}")

    data_offset, data_size, encoding, sample_rate, channels = struct.unpack(
        f"{prefix}5I", data[4:AU_HEADER_SIZE]
    )
    return AUHeader(data_offset, data_size, encoding, sample_rate, channels, byteorder)


def validate_header(header: AUHeader) -> None:
    """
    Reject AU variants the codec cannot consume.

    Only linear 8-bit or 16-bit PCM, 8 kHz, mono is supported.
    """
    if (header.encoding not in SAMPLE_WIDTHS
            or header.sample_rate != SAMPLE_RATE
            or header.channels != 1):
        raise UnsupportedFormatError(f"unsupported AU format: {header}")
    if header.data_offset < AU_HEADER_SIZE:
        raise UnsupportedFormatError(f"invalid AU data offset {header.data_offset}")


class AUFileSource:
    """
    SampleSource reading int16 samples from an AU file.
    """
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._file: Optional[BinaryIO] = open(self.path, "rb")
        try:
            self.header = parse_header(self._file.read(AU_HEADER_SIZE))
            validate_header(self.header)
            self._file.seek(self.header.data_offset)
        except Exception:
            self.close()
            raise

        if self.header.data_size == AU_UNKNOWN_SIZE:
            self._remaining: Optional[int] = None
        else:
            self._remaining = self.header.data_size
        self.sample_rate = self.header.sample_rate
        logger.debug("au_file_opened",
                     message=f"Opened AU file {self.path}",
                     header=str(self.header))

    def read_samples(self, count: int) -> Optional[np.ndarray]:
        """Read up to ``count`` samples, or None once the data is exhausted"""
        if self._file is None:
            return None

        width = self.header.sample_width
        wanted = count * width
        if self._remaining is not None:
            wanted = min(wanted, self._remaining)
        data = self._file.read(wanted)
        # Drop a trailing partial sample
        data = data[:len(data) - len(data) % width]
        if not data:
            return None
        if self._remaining is not None:
            self._remaining -= len(data)
        return decode_samples(data, width, self.header.byteorder)

    def iter_chunks(self, count: int) -> Iterator[np.ndarray]:
        """Yield successive chunks of at most ``count`` samples"""
        while True:
            chunk = self.read_samples(count)
            if chunk is None:
                return
            yield chunk

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "AUFileSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def decode_au(data: bytes) -> Tuple[AUHeader, np.ndarray]:
    """Parse a complete in-memory AU file into its header and samples"""
    header = parse_header(data)
    validate_header(header)
    payload = data[header.data_offset:]
    if header.data_size != AU_UNKNOWN_SIZE:
        payload = payload[:header.data_size]
    width = header.sample_width
    payload = payload[:len(payload) - len(payload) % width]
    return header, decode_samples(payload, width, header.byteorder)


def encode_au(samples: np.ndarray) -> bytes:
    """Encode int16 samples as a 16-bit linear, 8 kHz, mono big-endian AU file"""
    payload = encode_pcm16(samples, "big")
    header = AU_MAGIC + struct.pack(
        ">5I", AU_HEADER_SIZE, len(payload), AU_ENCODING_LINEAR_16, SAMPLE_RATE, 1
    )
    return header + payload


def write_au(path: Union[str, Path], samples: np.ndarray) -> int:
    """Write samples to an AU file, returning the number of bytes written"""
    data = encode_au(samples)
    with open(path, "wb") as f:
        f.write(data)
    logger.debug("au_file_written", message=f"Wrote AU file {path}", size=len(data))
    return len(data)
