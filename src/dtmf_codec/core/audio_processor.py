# src/dtmf_codec/core/audio_processor.py
"""
Streaming audio front end for DTMF detection.
Decodes raw PCM byte chunks of any size, feeds them to a detection session,
and notifies async subscribers of each detected tone.
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Set

import numpy as np

from ..sources.pcm import decode_samples
from .coefficients import SAMPLE_RATE
from .dtmf_detector import DTMFDetector, DetectorConfig, ToneEvent
from .interfaces import CodecError, UnsupportedFormatError

# Configure module logger
logger = logging.getLogger(__name__)

# Digits kept per stream for the running result
DEFAULT_HISTORY_SIZE = 64

ToneSubscriber = Callable[[ToneEvent], Awaitable[None]]

@dataclass
class AudioConfig:
    """Audio stream format parameters"""
    sample_rate: int = SAMPLE_RATE
    channels: int = 1
    sample_width: int = 2  # bytes
    byteorder: str = "little"

class AudioProcessingError(CodecError):
    """Custom exception for audio processing errors"""
    pass

class AudioProcessor:
    """
    Turns a raw PCM byte stream into DTMF tone events.
    Keeps partial samples across chunks and notifies subscribers per event.
    """
    def __init__(self, config: Optional[AudioConfig] = None,
                 detector_config: Optional[DetectorConfig] = None,
                 history_size: int = DEFAULT_HISTORY_SIZE):
        self.config = config or AudioConfig()
        if self.config.sample_rate != SAMPLE_RATE or self.config.channels != 1:
            raise UnsupportedFormatError(
                f"Unsupported stream format: {self.config.sample_rate} Hz, {self.config.channels} channels"
            )
        if self.config.sample_width not in (1, 2):
            raise UnsupportedFormatError(f"Unsupported sample width: {self.config.sample_width} bytes")

        self.dtmf_detector = DTMFDetector(detector_config)
        self._pending = b""
        self._digits = deque(maxlen=history_size)
        self._dtmf_subscribers: Set[ToneSubscriber] = set()

        self._setup_logging()
        logger.info(f"Initialized AudioProcessor with config: {self.config}")

    def _setup_logging(self):
        """Configure processing statistics"""
        self.debug_stats = {
            'chunks_processed': 0,
            'bytes_processed': 0,
            'processing_errors': 0,
            'dtmf_events': 0,
            'subscriber_notifications': 0
        }
        logger.debug("Audio processing debug statistics initialized")

    async def subscribe_dtmf(self, callback: ToneSubscriber) -> None:
        """
        Subscribe to DTMF events.

        Args:
            callback: Coroutine function called with each ToneEvent
        """
        self._dtmf_subscribers.add(callback)
        logger.debug(f"Added DTMF subscriber, total subscribers: {len(self._dtmf_subscribers)}")

    async def unsubscribe_dtmf(self, callback: ToneSubscriber) -> None:
        """
        Unsubscribe from DTMF events.

        Args:
            callback: Previously registered callback
        """
        self._dtmf_subscribers.discard(callback)
        logger.debug(f"Removed DTMF subscriber, total subscribers: {len(self._dtmf_subscribers)}")

    async def _notify_dtmf_subscribers(self, event: ToneEvent) -> None:
        """
        Notify all subscribers of a DTMF event.

        Args:
            event: Tone event to broadcast
        """
        if not self._dtmf_subscribers:
            return

        results = await asyncio.gather(
            *(callback(event) for callback in self._dtmf_subscribers),
            return_exceptions=True
        )
        self.debug_stats['subscriber_notifications'] += len(results)
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"DTMF subscriber failed: {result!r}")
        logger.debug(f"Notified {len(results)} DTMF subscribers of event: {event}")

    def _decode(self, raw_data: bytes) -> np.ndarray:
        data = self._pending + raw_data
        width = self.config.sample_width
        usable = len(data) - len(data) % width
        self._pending = data[usable:]
        return decode_samples(data[:usable], width, self.config.byteorder)

    async def process_chunk(self, raw_data: bytes) -> List[ToneEvent]:
        """
        Process one chunk of raw PCM.

        Args:
            raw_data: PCM bytes; may end in the middle of a sample

        Returns:
            Tone events detected in this chunk

        Raises:
            AudioProcessingError: If decoding or detection fails
        """
        try:
            samples = self._decode(raw_data)
            events = await asyncio.to_thread(self.dtmf_detector.process, samples)
            self.dtmf_detector.clear_result()
        except Exception as e:
            self.debug_stats['processing_errors'] += 1
            logger.error(f"Audio processing error: {str(e)}", exc_info=True)
            raise AudioProcessingError(f"Chunk processing failed: {str(e)}") from e

        self.debug_stats['chunks_processed'] += 1
        self.debug_stats['bytes_processed'] += len(raw_data)

        for event in events:
            self.debug_stats['dtmf_events'] += 1
            self._digits.append(event.symbol)
            logger.info(f"DTMF detected: {event.symbol}")
            await self._notify_dtmf_subscribers(event)

        return events

    @property
    def digits(self) -> str:
        """Most recent digits detected on this stream"""
        return "".join(self._digits)

    def reset(self) -> None:
        """Drop buffered data and detection state"""
        self._pending = b""
        self.dtmf_detector.reset()
        self._digits.clear()

    async def get_debug_info(self) -> dict:
        """Return detailed debug information about audio processing"""
        return {
            **self.debug_stats,
            'pending_bytes': len(self._pending),
            'dtmf_debug': self.dtmf_detector.get_debug_info(),
            'dtmf_subscribers': len(self._dtmf_subscribers),
        }
