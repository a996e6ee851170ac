"""
Two-level mask generation.
"""

from typing import Optional

import cv2
import numpy as np

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, check_cancelled

FOREGROUND = 255
BACKGROUND = 0


def apply_threshold(
    source: PixelSource,
    threshold: int,
    token: Optional[CancellationToken] = None,
) -> PixelSource:
    """
    Map luma > threshold to 255 and everything else to 0.

    Args:
        source: Pixels to binarize
        threshold: Intensity in [0, 255]; equal values go to background
        token: Polled once per row

    Returns:
        Grayscale PixelSource with the same bounds as `source`
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"Threshold out of range: {threshold}")

    bounds = source.bounds
    mask = np.zeros((source.height, source.width), dtype=np.uint8)

    for row, y in enumerate(range(bounds.min_y, bounds.max_y)):
        check_cancelled(token)
        if source.width == 0:
            continue
        gray = source.gray_row(y).reshape(1, -1)
        _, binary = cv2.threshold(gray, threshold, FOREGROUND, cv2.THRESH_BINARY)
        mask[row] = binary[0]

    return PixelSource(mask, origin=source.origin)
