"""
Horizontal run extraction for one mask row.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class RowSegment:
    """Maximal run of 0-valued pixels on row y, end_x inclusive."""

    start_x: int
    end_x: int
    y: int

    def overlaps(self, other: "RowSegment") -> bool:
        """Check if the X ranges share at least one column."""
        return not (self.end_x < other.start_x or other.end_x < self.start_x)


def find_row_segments(values: np.ndarray, y: int, min_x: int = 0) -> list[RowSegment]:
    """
    Find maximal runs of value 0 in one row, left to right.

    A run still open at the right edge ends at the last column.

    Args:
        values: 1-D row of mask values
        y: Row index recorded on each segment
        min_x: Absolute X of values[0]

    Returns:
        Segments in ascending start_x; never overlapping or touching
    """
    black = np.asarray(values).ravel() == 0
    if not black.any():
        return []

    edges = np.diff(np.concatenate(([0], black.astype(np.int8), [0])))
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1) - 1

    return [
        RowSegment(start_x=min_x + int(s), end_x=min_x + int(e), y=y)
        for s, e in zip(starts, ends)
    ]
