"""
End-to-end scan pipeline.

Binarize, trace, render; optionally load from and save to files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from borderscan.binarization.handler import OtsuBinarizer
from borderscan.export.image_writer import save_image
from borderscan.ingest.loader import load_image
from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken
from borderscan.shared.config import get_settings
from borderscan.shared.models import TraceSummary, TracingMode
from borderscan.vectorization.handler import VectorizationHandler

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outputs of one pipeline run."""

    mask: PixelSource
    overlay: PixelSource
    threshold: int
    summary: TraceSummary
    contours: dict[int, list[tuple[int, int]]]


class BorderScanPipeline:
    """
    Runs binarization and contour tracing on one image.

    Cancellation propagates as OperationCancelled; no partial result is
    returned in that case.
    """

    def __init__(
        self,
        settings: Optional[Any] = None,
        mode: Optional[TracingMode] = None,
    ):
        self.settings = settings or get_settings()

        self.binarizer = OtsuBinarizer()
        self.vectorizer = VectorizationHandler(self.settings, mode=mode)

    def run(
        self,
        source: PixelSource,
        token: Optional[CancellationToken] = None,
    ) -> PipelineResult:
        """
        Process an image.

        Args:
            source: Input pixels
            token: Optional cancellation token

        Returns:
            PipelineResult
        """
        mask = self.binarizer.binarize(source, token)
        overlay = self.vectorizer.trace_contours(mask, token)

        return PipelineResult(
            mask=mask,
            overlay=overlay,
            threshold=self.binarizer.last_result.threshold,
            summary=self.vectorizer.last_summary,
            contours=self.vectorizer.last_contours,
        )

    def run_file(
        self,
        in_path: Union[str, Path],
        out_path: Union[str, Path],
        token: Optional[CancellationToken] = None,
    ) -> tuple[PipelineResult, Path]:
        """
        Load, process and save an image.

        Args:
            in_path: Input image path
            out_path: Output path; format from its extension
            token: Optional cancellation token

        Returns:
            (result, path written)
        """
        source = load_image(in_path)
        result = self.run(source, token)
        written = save_image(result.overlay, out_path, self.settings.output)

        logger.info(
            f"Scan complete: threshold {result.threshold}, "
            f"{result.summary.contour_count} contours -> {written}"
        )
        return result, written
