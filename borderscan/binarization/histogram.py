"""
Grayscale histogram accumulation.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, check_cancelled

HISTOGRAM_BINS = 256


@dataclass
class Histogram:
    """256-bucket luma histogram; counts sum to total."""

    counts: np.ndarray
    total: int

    @property
    def intensity_sum(self) -> float:
        """Sum of intensity * count over all buckets."""
        return float(np.dot(np.arange(HISTOGRAM_BINS, dtype=np.float64), self.counts))

    @classmethod
    def from_counts(cls, counts) -> "Histogram":
        """Build from an explicit sequence of 256 bucket counts."""
        counts = np.asarray(counts, dtype=np.int64)
        if counts.shape != (HISTOGRAM_BINS,):
            raise ValueError(f"Expected {HISTOGRAM_BINS} buckets, got {counts.shape}")
        if (counts < 0).any():
            raise ValueError("Histogram counts must be non-negative")
        return cls(counts=counts, total=int(counts.sum()))


def build_histogram(
    source: PixelSource,
    token: Optional[CancellationToken] = None,
) -> Histogram:
    """
    Scan every pixel once and count luma values.

    Args:
        source: Pixels to scan
        token: Polled once per row

    Returns:
        Histogram with total == width * height
    """
    counts = np.zeros(HISTOGRAM_BINS, dtype=np.int64)
    total = 0
    bounds = source.bounds

    for y in range(bounds.min_y, bounds.max_y):
        check_cancelled(token)
        gray = source.gray_row(y)
        counts += np.bincount(gray, minlength=HISTOGRAM_BINS)
        total += gray.size

    return Histogram(counts=counts, total=total)
