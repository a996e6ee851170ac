"""
Contour tracing for vectorization.

Scans a two-level mask top to bottom. Each row's runs of 0-valued pixels
are matched against the runs left open by the previous row: a run with no
predecessor starts a contour, a run overlapping a predecessor continues
its contour, and a predecessor with no successor is closed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, check_cancelled
from borderscan.shared.models import TraceSummary, TracingMode
from borderscan.vectorization.row_segmenter import RowSegment, find_row_segments

logger = logging.getLogger(__name__)

Point = tuple[int, int]


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Branch:
    """One edge of a traced region; always created in left/right pairs."""

    id: int
    side: Side


@dataclass
class ActiveSeries:
    """A run plus the contour edges it carries into the next row."""

    segment: RowSegment
    left_branch: Branch
    right_branch: Branch

    @property
    def contour_id(self) -> int:
        return self.left_branch.id


class ContourArena:
    """
    Point lists indexed by contour id.

    Ids are allocated from 1 upward; lists are append-only and never removed.
    """

    def __init__(self):
        self._points: list[list[Point]] = []

    def allocate(self) -> int:
        self._points.append([])
        return len(self._points)

    def append(self, contour_id: int, *points: Point) -> None:
        self._points[contour_id - 1].extend(points)

    def points(self, contour_id: int) -> list[Point]:
        return self._points[contour_id - 1]

    def items(self) -> Iterator[tuple[int, list[Point]]]:
        for index, points in enumerate(self._points):
            yield index + 1, points

    def __len__(self) -> int:
        return len(self._points)

    @property
    def point_count(self) -> int:
        return sum(len(points) for points in self._points)


class ContourTracker:
    """
    Row-by-row contour state machine.

    Feed rows top to bottom with `feed_row`, then call `finish` to close
    whatever is still open.

    In SIMPLE mode every overlap between a previous and a current run is a
    1:1 continuation, even when a region splits or two regions join; the
    extra pieces are started or closed as if they did not touch. SPLIT_MERGE
    mode matches overlaps many-to-many instead.
    """

    def __init__(self, mode: TracingMode = TracingMode.SIMPLE):
        self.mode = TracingMode(mode)
        self.arena = ContourArena()
        self.active: list[ActiveSeries] = []
        self.rows_scanned = 0
        self.finished = False

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _start(self, segment: RowSegment, y: int, next_row: list[ActiveSeries]) -> None:
        contour_id = self.arena.allocate()
        self.arena.append(contour_id, (segment.start_x, y), (segment.end_x, y))
        next_row.append(ActiveSeries(
            segment=segment,
            left_branch=Branch(contour_id, Side.LEFT),
            right_branch=Branch(contour_id, Side.RIGHT),
        ))

    def _end(self, series: ActiveSeries) -> None:
        # Closing edge right then left, on the series' own row
        seg = series.segment
        self.arena.append(series.contour_id, (seg.end_x, seg.y), (seg.start_x, seg.y))

    def _continue(
        self,
        series: ActiveSeries,
        segment: RowSegment,
        y: int,
        next_row: list[ActiveSeries],
    ) -> None:
        self.arena.append(series.contour_id, (segment.start_x, y), (segment.end_x, y))
        next_row.append(ActiveSeries(
            segment=segment,
            left_branch=series.left_branch,
            right_branch=series.right_branch,
        ))

    # ------------------------------------------------------------------
    # Row matching
    # ------------------------------------------------------------------

    def feed_row(self, segments: list[RowSegment], y: int) -> None:
        """
        Match one row's runs against the open series.

        Args:
            segments: Runs on row y in ascending start_x
            y: Row index
        """
        if self.finished:
            raise RuntimeError("Tracker already finished")

        if self.mode == TracingMode.SPLIT_MERGE:
            self.active = self._match_split_merge(self.active, segments, y)
        else:
            self.active = self._match_simple(self.active, segments, y)
        self.rows_scanned += 1

    def _match_simple(
        self,
        prev: list[ActiveSeries],
        cur: list[RowSegment],
        y: int,
    ) -> list[ActiveSeries]:
        next_row: list[ActiveSeries] = []
        i, j = 0, 0

        while i < len(prev) or j < len(cur):
            if j == len(cur):
                self._end(prev[i])
                i += 1
                continue

            if i == len(prev):
                self._start(cur[j], y, next_row)
                j += 1
                continue

            ps, cs = prev[i].segment, cur[j]

            if ps.overlaps(cs):
                self._continue(prev[i], cs, y, next_row)
                i += 1
                j += 1
            elif cs.end_x < ps.start_x:
                self._start(cs, y, next_row)
                j += 1
            else:
                self._end(prev[i])
                i += 1

        return next_row

    def _match_split_merge(
        self,
        prev: list[ActiveSeries],
        cur: list[RowSegment],
        y: int,
    ) -> list[ActiveSeries]:
        # Leftmost overlapping previous series for each current run
        owner: list[Optional[int]] = [None] * len(cur)
        i, j = 0, 0
        while i < len(prev) and j < len(cur):
            ps, cs = prev[i].segment, cur[j]
            if ps.overlaps(cs):
                if owner[j] is None:
                    owner[j] = i
                if ps.end_x < cs.end_x:
                    i += 1
                else:
                    j += 1
            elif ps.end_x < cs.start_x:
                i += 1
            else:
                j += 1

        owning = {o for o in owner if o is not None}

        # Process events in X order so ids are allocated left to right
        events: list[tuple[int, int, int]] = []
        for index, series in enumerate(prev):
            if index not in owning:
                events.append((series.segment.start_x, 0, index))
        for index, segment in enumerate(cur):
            events.append((segment.start_x, 1, index))
        events.sort()

        next_row: list[ActiveSeries] = []
        carried: set[int] = set()
        for _, kind, index in events:
            if kind == 0:
                self._end(prev[index])
                continue

            segment = cur[index]
            source = owner[index]
            if source is None:
                self._start(segment, y, next_row)
            elif source not in carried:
                carried.add(source)
                self._continue(prev[source], segment, y, next_row)
            else:
                # Further piece of a split: same contour, new edge pair
                contour_id = prev[source].contour_id
                self.arena.append(contour_id, (segment.start_x, y), (segment.end_x, y))
                next_row.append(ActiveSeries(
                    segment=segment,
                    left_branch=Branch(contour_id, Side.LEFT),
                    right_branch=Branch(contour_id, Side.RIGHT),
                ))

        return next_row

    def finish(self) -> None:
        """Close every series still open after the last row."""
        for series in self.active:
            self._end(series)
        self.active = []
        self.finished = True

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def contours(self) -> dict[int, list[Point]]:
        """Contour id to ordered points. Iteration order is not guaranteed."""
        return dict(self.arena.items())

    @property
    def summary(self) -> TraceSummary:
        return TraceSummary(
            contour_count=len(self.arena),
            point_count=self.arena.point_count,
            rows_scanned=self.rows_scanned,
        )


class ContourTracer:
    """Runs a ContourTracker over every row of a mask."""

    def __init__(self, mode: TracingMode = TracingMode.SIMPLE):
        self.mode = TracingMode(mode)

    def trace(
        self,
        mask: PixelSource,
        token: Optional[CancellationToken] = None,
    ) -> ContourTracker:
        """
        Trace the 0-valued regions of a mask.

        Args:
            mask: Two-level mask
            token: Polled once per row

        Returns:
            Finished tracker holding the contours

        Raises:
            OperationCancelled: If the token is cancelled at any poll point
        """
        tracker = ContourTracker(self.mode)
        bounds = mask.bounds

        for y in range(bounds.min_y, bounds.max_y):
            check_cancelled(token)
            segments = find_row_segments(mask.gray_row(y), y, bounds.min_x)
            tracker.feed_row(segments, y)

        tracker.finish()
        check_cancelled(token)

        logger.debug(f"Traced {len(tracker.arena)} contours over {tracker.rows_scanned} rows")
        return tracker
