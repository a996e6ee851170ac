"""
Contour overlay rendering.
"""

import logging
from typing import Iterable, Mapping

import numpy as np

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.models import Rectangle

logger = logging.getLogger(__name__)

RED = (255, 0, 0, 255)
WHITE = (255, 255, 255, 255)


class ContourRenderer:
    """Plots recorded contour points on a blank canvas."""

    def __init__(
        self,
        contour_color: tuple[int, int, int, int] = RED,
        background_color: tuple[int, int, int, int] = WHITE,
    ):
        self.contour_color = contour_color
        self.background_color = background_color

    def render(
        self,
        contours: Mapping[int, Iterable[tuple[int, int]]],
        bounds: Rectangle,
    ) -> PixelSource:
        """
        Draw every point of every contour.

        Only the recorded vertices are plotted, no connecting lines.
        Contours are visited in whatever order the mapping yields; the
        result does not depend on it. Points outside `bounds` are skipped.

        Args:
            contours: Contour id to (x, y) points in absolute coordinates
            bounds: Canvas rectangle

        Returns:
            RGBA PixelSource covering `bounds`
        """
        width, height = max(bounds.width, 0), max(bounds.height, 0)
        canvas = np.empty((height, width, 4), dtype=np.uint8)
        canvas[:, :] = self.background_color

        plotted = 0
        for points in contours.values():
            coords = np.asarray(list(points), dtype=np.int64).reshape(-1, 2)
            if coords.size == 0:
                continue
            cols = coords[:, 0] - bounds.min_x
            rows = coords[:, 1] - bounds.min_y
            inside = (cols >= 0) & (cols < width) & (rows >= 0) & (rows < height)
            canvas[rows[inside], cols[inside]] = self.contour_color
            plotted += int(inside.sum())

        logger.debug(f"Plotted {plotted} contour points")
        return PixelSource(canvas, origin=(bounds.min_x, bounds.min_y))


def render_step_frame(mask: PixelSource, overlay: PixelSource, rows: int) -> PixelSource:
    """
    Composite the overlay over the mask for the first `rows` rows.

    Rows below the cut show the mask alone, which lets a viewer step
    through the scan one line at a time.

    Args:
        mask: Binarized image
        overlay: Rendered contours with the mask's bounds
        rows: Number of rows to reveal, clamped to [0, height]

    Returns:
        RGBA PixelSource
    """
    if (mask.width, mask.height) != (overlay.width, overlay.height):
        raise ValueError(
            f"Overlay size {overlay.width}x{overlay.height} does not match "
            f"mask size {mask.width}x{mask.height}"
        )

    rows = min(max(int(rows), 0), mask.height)

    frame = np.empty((mask.height, mask.width, 4), dtype=np.uint8)
    for row, y in enumerate(range(mask.bounds.min_y, mask.bounds.max_y)):
        frame[row, :, :3] = mask.gray_row(y)[:, np.newaxis]
    frame[:, :, 3] = 255

    if rows:
        over = overlay.to_array()
        if over.ndim == 2:
            over = np.repeat(over[:, :, np.newaxis], 3, axis=2)
        if over.shape[2] == 3:
            alpha = np.full(over.shape[:2] + (1,), 255, dtype=np.uint8)
            over = np.concatenate([over, alpha], axis=2)
        # Source-over with straight alpha
        top = over[:rows].astype(np.float64)
        base = frame[:rows].astype(np.float64)
        a = top[:, :, 3:4] / 255.0
        blended = top[:, :, :3] * a + base[:, :, :3] * (1.0 - a)
        frame[:rows, :, :3] = np.rint(blended).astype(np.uint8)

    return PixelSource(frame, origin=mask.origin)
