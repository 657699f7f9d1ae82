"""Fixed-capacity ring buffer of audio samples."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable


class CircularBuffer:
    """Keeps the most recent ``capacity`` samples, oldest first."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._samples: deque[float] = deque(maxlen=capacity)

    def push_samples(self, samples: Iterable[float]) -> None:
        """Append samples, overwriting the oldest ones once full."""
        self._samples.extend(float(sample) for sample in samples)

    def to_list(self) -> list[float]:
        """Return the stored samples in logical (oldest to newest) order."""
        return list(self._samples)

    def clear(self) -> None:
        """Drop every stored sample."""
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def capacity(self) -> int:
        """The fixed number of samples the buffer can hold."""
        maxlen = self._samples.maxlen
        assert maxlen is not None
        return maxlen