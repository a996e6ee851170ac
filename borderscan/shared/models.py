"""
Core data models for BorderScan.

Values passed between the pipeline stages. Per-row tracer state lives in
plain dataclasses next to the tracer instead.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# Enumerations
# =============================================================================

class TracingMode(str, Enum):
    """How overlapping runs on consecutive rows are matched."""

    # Every overlap is a 1:1 continuation
    SIMPLE = "simple"
    # Overlaps are matched many-to-many so splits and merges keep ids
    SPLIT_MERGE = "split_merge"


# =============================================================================
# Geometry
# =============================================================================

class Rectangle(BaseModel):
    """Half-open pixel rectangle [min_x, max_x) x [min_y, max_y)."""

    min_x: int = 0
    min_y: int = 0
    max_x: int = Field(description="Exclusive right edge")
    max_y: int = Field(description="Exclusive bottom edge")

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    def contains(self, x: int, y: int) -> bool:
        """Check if a pixel coordinate lies inside the rectangle."""
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y


# =============================================================================
# Pass results
# =============================================================================

class ThresholdResult(BaseModel):
    """Outcome of Otsu threshold selection."""

    threshold: int = Field(ge=0, le=255)
    total_pixels: int = 0
    max_variance: float = 0.0


class TraceSummary(BaseModel):
    """Counts collected while tracing contours."""

    contour_count: int = 0
    point_count: int = 0
    rows_scanned: int = 0
