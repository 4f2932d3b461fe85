"""
Core package initialization.
Contains the DTMF detection and generation engines.
"""

from .interfaces import (
    CodecError,
    GeneratorState,
    SampleFormatError,
    SampleSource,
    UnsupportedFormatError,
)
from .coefficients import DTMF_SYMBOLS, SILENCE
from .dtmf_detector import DTMFDetector, DetectorConfig, ToneEvent, detect_batch
from .dtmf_generator import DTMFGenerator, GeneratorConfig, MAX_SYMBOLS, generate_sequence
from .audio_processor import AudioConfig, AudioProcessor, AudioProcessingError

__all__ = [
    'CodecError',
    'GeneratorState',
    'SampleFormatError',
    'SampleSource',
    'UnsupportedFormatError',
    'DTMF_SYMBOLS',
    'SILENCE',
    'DTMFDetector',
    'DetectorConfig',
    'ToneEvent',
    'detect_batch',
    'DTMFGenerator',
    'GeneratorConfig',
    'MAX_SYMBOLS',
    'generate_sequence',
    'AudioConfig',
    'AudioProcessor',
    'AudioProcessingError',
]
