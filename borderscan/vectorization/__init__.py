"""
Vectorization module for BorderScan.

Traces mask regions row by row and renders their contours.
"""

from borderscan.vectorization.handler import VectorizationHandler, trace_contours
from borderscan.vectorization.row_segmenter import RowSegment, find_row_segments
from borderscan.vectorization.contour_tracer import (
    ActiveSeries,
    Branch,
    ContourArena,
    ContourTracer,
    ContourTracker,
    Side,
)
from borderscan.vectorization.renderer import ContourRenderer, render_step_frame

__all__ = [
    "VectorizationHandler",
    "trace_contours",
    "RowSegment",
    "find_row_segments",
    "ActiveSeries",
    "Branch",
    "ContourArena",
    "ContourTracer",
    "ContourTracker",
    "Side",
    "ContourRenderer",
    "render_step_frame",
]
