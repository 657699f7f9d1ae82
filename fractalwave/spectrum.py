"""Windowed FFT analysis of recent samples into frequency bands."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np

from fractalwave.circular_buffer import CircularBuffer

log = logging.getLogger(__name__)

DEFAULT_FFT_ORDER = 13
DEFAULT_SAMPLE_RATE = 44100.0


class FrequencyBand(enum.IntEnum):
    """Frequency bands used for visualisation."""

    SUB_BASS = 0
    BASS = 1
    LOW_MID = 2
    MID = 3
    UPPER_MID = 4
    PRESENCE = 5
    BRILLIANCE = 6


@dataclass(frozen=True)
class BandRange:
    """Lower and upper bound of a band in hertz."""

    min_hz: float
    max_hz: float


BAND_RANGES: tuple[BandRange, ...] = (
    BandRange(20.0, 60.0),
    BandRange(60.0, 250.0),
    BandRange(250.0, 500.0),
    BandRange(500.0, 2000.0),
    BandRange(2000.0, 4000.0),
    BandRange(4000.0, 6000.0),
    BandRange(6000.0, 20000.0),
)

_BAND_LABELS = ("SubBass", "Bass", "LowMid", "Mid", "HighMid", "Presence", "Treble")


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class SpectrumAnalyzer:
    """Collects samples and computes average FFT magnitudes per band."""

    def __init__(self, fft_order: int = DEFAULT_FFT_ORDER) -> None:
        if fft_order < 1:
            raise ValueError(f"fft_order must be at least 1, got {fft_order}")
        self.fft_order = fft_order
        self.fft_size = 1 << fft_order
        indices = np.arange(self.fft_size)
        self.window = 0.5 * (1.0 - np.cos(2.0 * np.pi * indices / (self.fft_size - 1)))
        self._buffer = CircularBuffer(self.fft_size)
        self._levels: tuple[float, ...] = (0.0,) * len(FrequencyBand)

    def push_samples(self, samples: Iterable[float]) -> None:
        """Add newly played samples to the analysis window."""
        self._buffer.push_samples(samples)

    def ready(self) -> bool:
        """True once a full FFT window of samples has been collected."""
        return len(self._buffer) >= self.fft_size

    def perform_fft(self, sample_rate: float = DEFAULT_SAMPLE_RATE) -> bool:
        """Analyse the buffered samples; return False if there are too few."""
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        samples = np.asarray(self._buffer.to_list(), dtype=np.float64)
        if samples.size < self.fft_size:
            log.debug("not enough samples in circular buffer: %d", samples.size)
            return False

        spectrum = np.fft.rfft(samples[: self.fft_size] * self.window)
        magnitudes = np.abs(spectrum)
        half = self.fft_size // 2

        levels = []
        for band_range in BAND_RANGES:
            start = _clamp(int(band_range.min_hz * self.fft_size / sample_rate), 0, half)
            end = _clamp(int(band_range.max_hz * self.fft_size / sample_rate), 0, half)
            levels.append(float(magnitudes[start:end].mean()) if end > start else 0.0)
        self._levels = tuple(levels)
        return True

    def band_level(self, band: Union[FrequencyBand, int]) -> float:
        """Level of one band, or 0.0 for an index outside the bands."""
        index = int(band)
        if 0 <= index < len(self._levels):
            return self._levels[index]
        return 0.0

    def bands(self) -> tuple[float, ...]:
        """Levels of all bands, in ``FrequencyBand`` order."""
        return self._levels


def format_band_levels(levels: Sequence[float]) -> str:
    """Render band levels as a one-line, two-decimal summary."""
    if len(levels) != len(_BAND_LABELS):
        raise ValueError(f"expected {len(_BAND_LABELS)} levels, got {len(levels)}")
    return " ".join(f"{label}: {level:.2f}" for label, level in zip(_BAND_LABELS, levels))