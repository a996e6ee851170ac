"""
BorderScan: Otsu binarization and scanline contour tracing.

Converts a raster image into a two-level mask and traces the mask's dark
regions into a red-on-white contour overlay.
"""

from borderscan.binarization import binarize, invert
from borderscan.ingest import PixelSource, load_image
from borderscan.orchestration import BorderScanPipeline, PipelineResult
from borderscan.shared import CancellationToken, OperationCancelled, TracingMode
from borderscan.vectorization import trace_contours

__version__ = "0.1.0"

__all__ = [
    "binarize",
    "invert",
    "PixelSource",
    "load_image",
    "BorderScanPipeline",
    "PipelineResult",
    "CancellationToken",
    "OperationCancelled",
    "TracingMode",
    "trace_contours",
]
