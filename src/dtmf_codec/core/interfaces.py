# src/dtmf_codec/core/interfaces.py
"""
Core interfaces and types for the DTMF codec.
Defines exceptions, enums, and the protocol sample sources implement to feed
detection sessions.
"""

from enum import IntEnum
from typing import Protocol, Optional

import numpy as np

class CodecError(Exception):
    """Base exception for DTMF codec errors"""
    pass

class UnsupportedFormatError(CodecError):
    """Audio container or sample format the codec cannot consume"""
    pass

class SampleFormatError(CodecError):
    """Raw sample payload that does not decode to whole samples"""
    pass

class GeneratorState(IntEnum):
    """Generation session states"""
    READY = 0
    TONE = 1
    PAUSE = 2

class SampleSource(Protocol):
    """Protocol for adapters that deliver 16-bit PCM at 8 kHz"""
    sample_rate: int

    def read_samples(self, count: int) -> Optional[np.ndarray]:
        """Read up to ``count`` int16 samples, or None when exhausted"""
        ...

    def close(self) -> None:
        """Release the underlying resource"""
        ...
