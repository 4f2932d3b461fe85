# src/dtmf_codec/sources/pcm.py
"""
Conversions from raw PCM payloads to the int16 samples the codec consumes.
"""

import numpy as np

from ..core.interfaces import SampleFormatError, UnsupportedFormatError

BYTE_ORDERS = ("little", "big")


def _check_byteorder(byteorder: str) -> str:
    if byteorder not in BYTE_ORDERS:
        raise UnsupportedFormatError(f"Unknown byte order {byteorder!r}")
    return "<" if byteorder == "little" else ">"


def promote_8bit(data: bytes) -> np.ndarray:
    """
    Promote signed 8-bit samples to 16 bits.

    Samples are shifted into the upper byte; left at their raw level they
    are too quiet to pass the detector's power gate.
    """
    return np.frombuffer(data, dtype=np.int8).astype(np.int16) << 8


def decode_pcm16(data: bytes, byteorder: str = "little") -> np.ndarray:
    """Decode 16-bit PCM of either byte order into native int16 samples"""
    prefix = _check_byteorder(byteorder)
    if len(data) % 2:
        raise SampleFormatError(f"PCM16 payload has odd length {len(data)}")
    return np.frombuffer(data, dtype=f"{prefix}i2").astype(np.int16)


def encode_pcm16(samples: np.ndarray, byteorder: str = "little") -> bytes:
    """Encode int16 samples as 16-bit PCM of the given byte order"""
    prefix = _check_byteorder(byteorder)
    return np.asarray(samples, dtype=np.int16).astype(f"{prefix}i2").tobytes()


def decode_samples(data: bytes, sample_width: int = 2, byteorder: str = "little") -> np.ndarray:
    """
    Decode a raw payload of 8-bit or 16-bit linear PCM.

    Raises:
        UnsupportedFormatError: For any other sample width
    """
    if sample_width == 1:
        return promote_8bit(data)
    if sample_width == 2:
        return decode_pcm16(data, byteorder)
    raise UnsupportedFormatError(f"Unsupported sample width: {sample_width} bytes")
