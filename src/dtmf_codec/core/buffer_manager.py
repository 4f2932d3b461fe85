# src/dtmf_codec/core/buffer_manager.py
"""
Fixed-capacity sample accumulator used to assemble detector batches.
Owned by a single detection session; no locking.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

class AccumulatorError(Exception):
    """Custom exception for accumulator operations"""
    pass

class SampleAccumulator:
    """
    Collects int16 samples until a full batch is available.
    """
    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"Accumulator capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.buffer = np.zeros(capacity, dtype=np.int16)
        self.count = 0
        self._setup_logging()
        logger.debug(f"Initialized SampleAccumulator with capacity {capacity}")

    def _setup_logging(self):
        """Configure accumulator statistics"""
        self.stats = {
            'samples_written': 0,
            'batches_drained': 0,
        }

    @property
    def is_full(self) -> bool:
        return self.count == self.capacity

    @property
    def space(self) -> int:
        return self.capacity - self.count

    def fill(self, samples: np.ndarray) -> int:
        """
        Copy as many samples as fit into the accumulator.

        Args:
            samples: int16 samples to append

        Returns:
            Number of samples consumed from ``samples``
        """
        taken = min(len(samples), self.space)
        if taken:
            self.buffer[self.count:self.count + taken] = samples[:taken]
            self.count += taken
            self.stats['samples_written'] += taken
        return taken

    def drain(self) -> np.ndarray:
        """
        Hand out the completed batch and empty the accumulator.

        Raises:
            AccumulatorError: If the batch is not complete
        """
        if not self.is_full:
            raise AccumulatorError(
                f"Cannot drain partial batch ({self.count}/{self.capacity} samples)"
            )
        batch = self.buffer.copy()
        self.count = 0
        self.stats['batches_drained'] += 1
        return batch

    def pending(self) -> np.ndarray:
        """Samples currently buffered, as a copy"""
        return self.buffer[:self.count].copy()

    def clear(self) -> None:
        self.count = 0

    @property
    def utilization(self) -> float:
        return self.count / self.capacity

    def get_stats(self) -> dict:
        """Return accumulator statistics"""
        return {
            **self.stats,
            'current_utilization': self.utilization,
            'capacity': self.capacity,
            'buffered': self.count
        }
