# src/dtmf_codec/api/models.py

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

class AudioFormat(str, Enum):
    """Container for generated audio"""
    PCM = "pcm"
    AU = "au"

class ByteOrder(str, Enum):
    """Byte order of raw PCM16 payloads"""
    LITTLE = "little"
    BIG = "big"

class DTMFEvent(BaseModel):
    """DTMF tone detection event"""
    digit: str
    batch_index: int
    sample_offset: int  # Samples from the start of the stream

    @classmethod
    def from_tone_event(cls, event) -> "DTMFEvent":
        return cls(digit=event.symbol,
                   batch_index=event.batch_index,
                   sample_offset=event.sample_offset)

class DetectionResult(BaseModel):
    """Outcome of detecting a complete recording"""
    digits: str
    events: List[DTMFEvent]
    samples: int
    batches: int

class GenerateRequest(BaseModel):
    """Parameters for synthesizing a DTMF sequence"""
    digits: str = Field(..., min_length=1, max_length=256, pattern=r"^[0-9A-Da-d*#\s]+$")
    # Unset durations fall back to the configured generator settings
    tone_ms: Optional[int] = Field(None, gt=0, le=10_000)
    pause_ms: Optional[int] = Field(None, ge=0, le=10_000)
    frame_size: Optional[int] = Field(None, gt=0, le=8000)
    format: AudioFormat = AudioFormat.PCM

class CodecStatus(BaseModel):
    """Codec parameters and service counters"""
    version: str
    sample_rate: int
    batch_size: int
    frame_size: int
    tone_ms: int
    pause_ms: int
    symbols: str
    active_streams: int
    detections: int
    generations: int
