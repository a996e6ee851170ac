"""
Main handler for the binarization module.

Histogram, Otsu threshold and mask generation in sequence.
"""

import logging
from typing import Optional

from borderscan.binarization.binarizer import apply_threshold
from borderscan.binarization.histogram import build_histogram
from borderscan.binarization.otsu import select_threshold
from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, check_cancelled
from borderscan.shared.models import ThresholdResult

logger = logging.getLogger(__name__)


class OtsuBinarizer:
    """
    Otsu binarization.

    Produces a mask where luma above the selected threshold is 255
    (foreground) and everything else is 0 (background).
    """

    def __init__(self):
        self.last_result: Optional[ThresholdResult] = None

    def binarize(
        self,
        source: PixelSource,
        token: Optional[CancellationToken] = None,
    ) -> PixelSource:
        """
        Binarize an image.

        Args:
            source: Input pixels
            token: Optional cancellation token

        Returns:
            Two-level grayscale mask with the source's bounds

        Raises:
            OperationCancelled: If the token is cancelled at any poll point
        """
        logger.info(f"Binarizing {source.width}x{source.height} image")

        histogram = build_histogram(source, token)
        result = select_threshold(histogram, token)
        mask = apply_threshold(source, result.threshold, token)
        check_cancelled(token)

        self.last_result = result
        logger.info(
            f"Selected threshold {result.threshold}",
            extra={"threshold": result.threshold},
        )
        return mask


def binarize(
    source: PixelSource,
    token: Optional[CancellationToken] = None,
) -> PixelSource:
    """Binarize `source` with Otsu's method."""
    return OtsuBinarizer().binarize(source, token)
