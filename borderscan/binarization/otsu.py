"""
Otsu threshold selection.

Picks the intensity that maximizes between-class variance of the two
populations split at it.
"""

import logging
from typing import Optional

from borderscan.binarization.histogram import HISTOGRAM_BINS, Histogram
from borderscan.shared.cancellation import CancellationToken, check_cancelled
from borderscan.shared.models import ThresholdResult

logger = logging.getLogger(__name__)


def select_threshold(
    histogram: Histogram,
    token: Optional[CancellationToken] = None,
) -> ThresholdResult:
    """
    Find the Otsu threshold in one forward pass over 0..255.

    Intensities before any background mass are skipped, and the scan stops
    once no foreground mass is left. Ties keep the first (smallest)
    intensity. With no valid split the threshold is 0.

    Args:
        histogram: Luma histogram
        token: Polled once per candidate intensity

    Returns:
        ThresholdResult
    """
    counts = [int(c) for c in histogram.counts]
    total = histogram.total
    total_sum = histogram.intensity_sum

    sum_b = 0.0
    w_b = 0
    max_variance = 0.0
    threshold = 0

    for t in range(HISTOGRAM_BINS):
        check_cancelled(token)

        w_b += counts[t]
        if w_b == 0:
            continue

        w_f = total - w_b
        if w_f == 0:
            break

        sum_b += t * counts[t]

        mean_b = sum_b / w_b
        mean_f = (total_sum - sum_b) / w_f

        variance = w_b * w_f * (mean_b - mean_f) ** 2

        if variance > max_variance:
            max_variance = variance
            threshold = t

    logger.debug(f"Otsu threshold {threshold} (variance {max_variance:.1f}, {total} pixels)")

    return ThresholdResult(
        threshold=threshold,
        total_pixels=total,
        max_variance=max_variance,
    )
