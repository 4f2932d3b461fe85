# src/dtmf_codec/core/dtmf_detector.py
"""
DTMF tone detection module.
Implements a fixed-point Goertzel filter bank over fixed-size sample batches.
Handles batching of arbitrary input chunks, per-batch decisions, and debouncing
of held tones into single tone events, with structured logging.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from ..utils.logger import DTMFLogger
from .buffer_manager import SampleAccumulator
from .coefficients import BATCH_SIZE, SAMPLE_RATE, SILENCE
from .decision import decide, has_power
from .goertzel import filter_bank
from .interfaces import UnsupportedFormatError
from .normalizer import normalize

# Get structured logger
logger = DTMFLogger().get_logger(__name__)

@dataclass
class DetectorConfig:
    """DTMF detection configuration parameters"""
    sample_rate: int = SAMPLE_RATE
    batch_size: int = BATCH_SIZE

@dataclass(frozen=True)
class ToneEvent:
    """Onset of a new DTMF tone"""
    symbol: str
    batch_index: int
    sample_offset: int

ToneCallback = Callable[[ToneEvent], None]


def detect_batch(batch: np.ndarray) -> str:
    """
    Detect the symbol present in one complete batch.

    Args:
        batch: int16 samples, exactly one batch long

    Returns:
        A DTMF symbol or SILENCE
    """
    if not has_power(batch):
        return SILENCE
    return decide(filter_bank(normalize(batch).tolist()))


class DTMFDetector:
    """
    Streaming DTMF detection session.
    Accepts samples in chunks of any size and reports each tone once, at its onset.
    """

    def __init__(self, config: Optional[DetectorConfig] = None,
                 on_tone: Optional[ToneCallback] = None):
        self.config = config or DetectorConfig()
        if self.config.sample_rate != SAMPLE_RATE:
            raise UnsupportedFormatError(
                f"Unsupported sample rate {self.config.sample_rate}, detector requires {SAMPLE_RATE} Hz"
            )
        self.on_tone = on_tone
        self._accumulator = SampleAccumulator(self.config.batch_size)
        self._last_symbol = SILENCE
        self._batch_index = 0
        self._events: List[ToneEvent] = []

        self._setup_logging()
        logger.debug("dtmf_detector_init",
                     message="Initializing DTMF detector",
                     config=vars(self.config))

    def _setup_logging(self) -> None:
        """Configure DTMF-specific statistics"""
        self.debug_stats = {
            'batches_processed': 0,
            'tone_batches': 0,
            'tones_detected': 0,
        }

    @property
    def batch_size(self) -> int:
        return self.config.batch_size

    @property
    def last_symbol(self) -> str:
        """Symbol of the most recent batch, SILENCE included"""
        return self._last_symbol

    @property
    def result(self) -> str:
        """Symbols detected since the last clear"""
        return "".join(event.symbol for event in self._events)

    @property
    def events(self) -> List[ToneEvent]:
        return list(self._events)

    def process(self, samples: np.ndarray) -> List[ToneEvent]:
        """
        Feed samples into the session.

        Args:
            samples: int16 PCM samples at 8 kHz, any length

        Returns:
            Tone events emitted while processing these samples
        """
        samples = np.asarray(samples, dtype=np.int16).ravel()
        emitted: List[ToneEvent] = []
        size = self.batch_size
        offset = 0

        if self._accumulator.count:
            offset = self._accumulator.fill(samples)
            if not self._accumulator.is_full:
                return emitted
            self._run_batch(self._accumulator.drain(), emitted)

        while len(samples) - offset >= size:
            self._run_batch(samples[offset:offset + size], emitted)
            offset += size

        self._accumulator.fill(samples[offset:])
        self._notify(emitted)
        return emitted

    def _notify(self, events: List[ToneEvent]) -> None:
        if self.on_tone is None:
            return
        for event in events:
            try:
                self.on_tone(event)
            except Exception as e:
                logger.error("dtmf_callback_failed",
                             message=f"Tone callback failed: {e!r}",
                             digit=event.symbol,
                             exc_info=True)

    def _run_batch(self, batch: np.ndarray, emitted: List[ToneEvent]) -> None:
        symbol = detect_batch(batch)
        index = self._batch_index
        self._batch_index += 1
        self.debug_stats['batches_processed'] += 1

        if symbol != SILENCE:
            self.debug_stats['tone_batches'] += 1
            if symbol != self._last_symbol:
                event = ToneEvent(symbol=symbol,
                                  batch_index=index,
                                  sample_offset=index * self.batch_size)
                self._events.append(event)
                emitted.append(event)
                self.debug_stats['tones_detected'] += 1
                logger.info("dtmf_tone_detected",
                            message=f"DTMF tone detected: {symbol}",
                            digit=symbol,
                            batch_index=index)

        self._last_symbol = symbol

    def clear_result(self) -> None:
        """Forget accumulated tone events; buffering and debounce state are kept"""
        self._events.clear()

    def reset(self) -> None:
        """Return the session to its initial state"""
        self._events.clear()
        self._accumulator.clear()
        self._last_symbol = SILENCE
        self._batch_index = 0
        self._setup_logging()
        logger.debug("dtmf_detector_reset", message="DTMF detector reset")

    def get_debug_info(self) -> dict:
        """Get debug statistics and state information"""
        return {
            **self.debug_stats,
            'last_symbol': self._last_symbol,
            'buffered_samples': self._accumulator.count,
            'result': self.result,
            'batch_size': self.batch_size,
        }
