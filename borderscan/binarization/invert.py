"""
Color inversion.
"""

from typing import Optional

import numpy as np

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, check_cancelled


def invert(
    source: PixelSource,
    token: Optional[CancellationToken] = None,
) -> PixelSource:
    """
    Invert color channels, keeping alpha.

    Sources without alpha come out opaque.

    Args:
        source: Pixels to invert
        token: Polled once per row

    Returns:
        RGBA PixelSource with the same bounds
    """
    pixels = source.to_array()
    out = np.full((source.height, source.width, 4), 255, dtype=np.uint8)

    for row in range(source.height):
        check_cancelled(token)
        line = pixels[row]
        if source.is_grayscale:
            out[row, :, :3] = (255 - line)[:, np.newaxis]
        else:
            out[row, :, :3] = 255 - line[:, :3]
            if source.channels == 4:
                out[row, :, 3] = line[:, 3]

    check_cancelled(token)
    return PixelSource(out, origin=source.origin)
