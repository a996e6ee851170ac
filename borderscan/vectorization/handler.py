"""
Main handler for vectorization module.
"""

import logging
from typing import Any, Optional

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken
from borderscan.shared.config import get_settings
from borderscan.shared.models import TraceSummary, TracingMode
from borderscan.vectorization.contour_tracer import ContourTracer
from borderscan.vectorization.renderer import ContourRenderer

logger = logging.getLogger(__name__)


class VectorizationHandler:
    """
    Main vectorization handler.

    Traces the 0-valued regions of a binarized mask and renders their
    contour points as a red-on-white overlay.
    """

    def __init__(
        self,
        settings: Optional[Any] = None,
        mode: Optional[TracingMode] = None,
    ):
        """Initialize vectorization handler."""
        self.settings = settings or get_settings()

        self.contour_tracer = ContourTracer(
            mode or TracingMode(self.settings.processing.tracing_mode)
        )
        self.renderer = ContourRenderer(
            contour_color=tuple(self.settings.render.contour_color),
            background_color=tuple(self.settings.render.background_color),
        )
        self.last_summary: Optional[TraceSummary] = None
        self.last_contours: Optional[dict[int, list[tuple[int, int]]]] = None

    def trace_contours(
        self,
        mask: PixelSource,
        token: Optional[CancellationToken] = None,
    ) -> PixelSource:
        """
        Trace and render contours.

        Args:
            mask: Two-level mask from the binarizer
            token: Optional cancellation token

        Returns:
            RGBA overlay with the mask's bounds

        Raises:
            OperationCancelled: If the token is cancelled at any poll point
        """
        logger.info(f"Tracing contours ({self.contour_tracer.mode.value} mode)")

        tracker = self.contour_tracer.trace(mask, token)
        contours = tracker.contours
        overlay = self.renderer.render(contours, mask.bounds)

        self.last_summary = tracker.summary
        self.last_contours = contours
        logger.info(
            f"Traced {self.last_summary.contour_count} contours",
            extra={"contours": self.last_summary.contour_count, "rows": self.last_summary.rows_scanned},
        )
        return overlay


def trace_contours(
    mask: PixelSource,
    token: Optional[CancellationToken] = None,
    mode: TracingMode = TracingMode.SIMPLE,
) -> PixelSource:
    """Trace `mask` and return the rendered overlay with default colors."""
    tracker = ContourTracer(mode).trace(mask, token)
    return ContourRenderer().render(tracker.contours, mask.bounds)
