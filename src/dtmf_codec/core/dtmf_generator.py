# src/dtmf_codec/core/dtmf_generator.py
"""
DTMF tone generation module.
Synthesizes PCM frames for a queued sequence of keypad symbols using two
fixed-point resonators, alternating tone and pause segments whose lengths are
counted in output frames. Exposes a ready flag for cooperative flow control.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np

from ..utils.logger import DTMFLogger
from .coefficients import (
    GENERATOR_COLUMN_COEFFICIENTS,
    GENERATOR_ROW_COEFFICIENTS,
    SAMPLES_PER_MS,
    symbol_position,
)
from .interfaces import GeneratorState
from .oscillator import Oscillator, mix

# Get structured logger
logger = DTMFLogger().get_logger(__name__)

# Largest number of symbols accepted by one submission
MAX_SYMBOLS = 20

@dataclass
class GeneratorConfig:
    """DTMF generation configuration parameters"""
    frame_size: int = 160  # 20ms @ 8kHz
    tone_ms: int = 70
    pause_ms: int = 50


def duration_to_frames(duration_ms: int, frame_size: int) -> int:
    """Number of whole frames covering a duration, always at least one"""
    return (duration_ms * SAMPLES_PER_MS) // frame_size + 1


def _normalize_symbols(symbols: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(symbols, str):
        symbols = [s for s in symbols if not s.isspace()]
    return [str(s).upper() for s in symbols]


class DTMFGenerator:
    """
    DTMF generation session.
    Accepts up to MAX_SYMBOLS symbols per submission and emits one frame per call.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        if self.config.frame_size <= 0:
            raise ValueError(f"Frame size must be positive, got {self.config.frame_size}")
        if self.config.tone_ms <= 0 or self.config.pause_ms < 0:
            raise ValueError("Tone duration must be positive and pause duration non-negative")

        self.tone_frames = duration_to_frames(self.config.tone_ms, self.config.frame_size)
        self.pause_frames = duration_to_frames(self.config.pause_ms, self.config.frame_size)

        self._row = Oscillator()
        self._column = Oscillator()
        self._symbols: List[str] = []
        self._index = 0
        self._tone_remaining = 0
        self._pause_remaining = 0
        self.state = GeneratorState.READY

        self._setup_logging()
        logger.debug("dtmf_generator_init",
                     message="Initializing DTMF generator",
                     config=vars(self.config),
                     tone_frames=self.tone_frames,
                     pause_frames=self.pause_frames)

    def _setup_logging(self) -> None:
        """Configure generator statistics"""
        self.debug_stats = {
            'submissions': 0,
            'rejected_submissions': 0,
            'symbols_generated': 0,
            'frames_generated': 0,
        }

    @property
    def frame_size(self) -> int:
        return self.config.frame_size

    @property
    def ready(self) -> bool:
        """Whether a new sequence may be submitted"""
        return self.state == GeneratorState.READY

    @property
    def pending(self) -> List[str]:
        """Symbols not yet completely emitted"""
        return self._symbols[self._index:]

    def submit(self, symbols: Union[str, Iterable[str]]) -> bool:
        """
        Queue a new sequence of symbols.

        Sequences longer than MAX_SYMBOLS are truncated. An empty sequence is
        accepted and leaves the generator ready.

        Args:
            symbols: Keypad symbols, as a string or an iterable of single characters

        Returns:
            False if the generator is still busy with a previous sequence
        """
        if not self.ready:
            self.debug_stats['rejected_submissions'] += 1
            logger.warning("dtmf_generator_busy",
                           message="Submission rejected while generating",
                           pending=self.pending)
            return False

        queued = _normalize_symbols(symbols)
        if not queued:
            self._symbols = []
            self._index = 0
            return True

        if len(queued) > MAX_SYMBOLS:
            logger.warning("dtmf_sequence_truncated",
                           message=f"Sequence truncated to {MAX_SYMBOLS} symbols",
                           requested=len(queued))
            queued = queued[:MAX_SYMBOLS]

        self._symbols = queued
        self._index = 0
        self._tone_remaining = self.tone_frames
        self._pause_remaining = self.pause_frames
        self.state = GeneratorState.TONE
        self.debug_stats['submissions'] += 1
        logger.debug("dtmf_sequence_submitted",
                     message="New DTMF sequence queued",
                     symbols="".join(queued))
        return True

    def _start_symbol(self, symbol: str) -> None:
        position = symbol_position(symbol)
        if position is None:
            logger.warning("dtmf_unknown_symbol",
                           message=f"Unknown DTMF symbol {symbol!r}, emitting silence",
                           symbol=symbol)
            self._row.silence()
            self._column.silence()
            return
        row, column = position
        self._row.start(GENERATOR_ROW_COEFFICIENTS[row])
        self._column.start(GENERATOR_COLUMN_COEFFICIENTS[column])
        self.debug_stats['symbols_generated'] += 1

    def generate_frame(self) -> np.ndarray:
        """
        Synthesize the next frame of the current sequence.

        Returns:
            frame_size int16 samples; silence once the sequence is exhausted
        """
        self.debug_stats['frames_generated'] += 1

        while self._index < len(self._symbols):
            if self._tone_remaining == self.tone_frames:
                self._start_symbol(self._symbols[self._index])
                self.state = GeneratorState.TONE

            if self._tone_remaining > 0:
                self._tone_remaining -= 1
                return mix(self._row, self._column, self.frame_size)

            if self._pause_remaining > 0:
                self._pause_remaining -= 1
                self.state = GeneratorState.PAUSE
                return np.zeros(self.frame_size, dtype=np.int16)

            self._tone_remaining = self.tone_frames
            self._pause_remaining = self.pause_frames
            self._index += 1

        if self.state != GeneratorState.READY:
            logger.debug("dtmf_sequence_complete", message="DTMF sequence complete")
        self.state = GeneratorState.READY
        return np.zeros(self.frame_size, dtype=np.int16)

    def stream(self) -> Iterator[np.ndarray]:
        """Yield frames until the current sequence is exhausted"""
        while not self.ready:
            yield self.generate_frame()

    def reset(self) -> None:
        """Abandon the current sequence and become ready"""
        self._symbols = []
        self._index = 0
        self._tone_remaining = 0
        self._pause_remaining = 0
        self._row.silence()
        self._column.silence()
        self.state = GeneratorState.READY
        logger.debug("dtmf_generator_reset", message="DTMF generator reset")

    def get_debug_info(self) -> dict:
        """Get debug statistics and state information"""
        return {
            **self.debug_stats,
            'state': self.state.name,
            'pending': "".join(self.pending),
            'tone_frames': self.tone_frames,
            'pause_frames': self.pause_frames,
        }


def generate_sequence(symbols: Union[str, Iterable[str]],
                      config: Optional[GeneratorConfig] = None) -> np.ndarray:
    """
    Synthesize any number of symbols, submitting them MAX_SYMBOLS at a time.

    Returns:
        All frames concatenated, including the silent frame that closes each submission
    """
    generator = DTMFGenerator(config)
    queued = _normalize_symbols(symbols)
    frames: List[np.ndarray] = []

    for start in range(0, len(queued), MAX_SYMBOLS):
        generator.submit(queued[start:start + MAX_SYMBOLS])
        frames.extend(generator.stream())

    if not frames:
        return np.zeros(0, dtype=np.int16)
    return np.concatenate(frames)
