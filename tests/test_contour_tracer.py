"""Tests for the row-by-row contour tracker."""

import numpy as np
import pytest

from borderscan.ingest.pixel_source import PixelSource
from borderscan.shared.cancellation import CancellationToken, OperationCancelled
from borderscan.shared.models import TracingMode
from borderscan.vectorization.contour_tracer import (
    ContourArena,
    ContourTracer,
    ContourTracker,
    Side,
)
from borderscan.vectorization.row_segmenter import RowSegment


def mask_from_rows(rows: list[str]) -> PixelSource:
    """Build a mask where '#' is 0 and '.' is 255."""
    data = np.array([[0 if c == "#" else 255 for c in row] for row in rows], dtype=np.uint8)
    return PixelSource(data)


def trace(rows: list[str], mode: TracingMode = TracingMode.SIMPLE) -> ContourTracker:
    return ContourTracer(mode).trace(mask_from_rows(rows))


def test_continue_then_close():
    """Run on three rows, absent on the fourth: 8 points under id 1."""
    tracker = trace([
        "..####..",
        "..####..",
        "..####..",
        "........",
    ])

    assert tracker.contours == {
        1: [(2, 0), (5, 0), (2, 1), (5, 1), (2, 2), (5, 2), (5, 2), (2, 2)],
    }


def test_two_starts_on_one_row():
    """Disjoint runs open ids in ascending X order."""
    tracker = trace(["##..##"])

    contours = tracker.contours
    assert sorted(contours) == [1, 2]
    assert contours[1][:2] == [(0, 0), (1, 0)]
    assert contours[2][:2] == [(4, 0), (5, 0)]


def test_final_row_closure():
    """Run open on the last row closes with that row's coordinates."""
    tracker = trace([
        ".##.",
        ".##.",
    ])

    assert tracker.contours[1] == [(1, 0), (2, 0), (1, 1), (2, 1), (2, 1), (1, 1)]
    assert tracker.active == []
    assert tracker.finished


def test_start_left_of_previous():
    """New run entirely left of an open one starts a new contour."""
    tracker = trace([
        "....##",
        "##..##",
    ])

    contours = tracker.contours
    assert contours[1] == [(4, 0), (5, 0), (4, 1), (5, 1), (5, 1), (4, 1)]
    assert contours[2] == [(0, 1), (1, 1), (1, 1), (0, 1)]


def test_end_left_of_current():
    """Open run entirely left of the current one is closed mid-scan."""
    tracker = trace([
        "##....",
        "....##",
    ])

    contours = tracker.contours
    assert contours[1] == [(0, 0), (1, 0), (1, 0), (0, 0)]
    assert contours[2] == [(4, 1), (5, 1), (5, 1), (4, 1)]


def test_split_treated_as_continuation():
    """A split keeps one piece on the old id and starts a new id for the rest."""
    tracker = trace([
        "#######.",
        "##..###.",
        "........",
    ])

    assert tracker.contours == {
        1: [(0, 0), (6, 0), (0, 1), (1, 1), (1, 1), (0, 1)],
        2: [(4, 1), (6, 1), (6, 1), (4, 1)],
    }


def test_merge_treated_as_continuation():
    """A merge continues the left id and closes the right one."""
    tracker = trace([
        "##..##",
        "######",
        "......",
    ])

    assert tracker.contours == {
        1: [(0, 0), (1, 0), (0, 1), (5, 1), (5, 1), (0, 1)],
        2: [(4, 0), (5, 0), (5, 0), (4, 0)],
    }


def test_split_merge_mode_keeps_split_on_one_id():
    """Split pieces share the id of the run they came from."""
    tracker = trace([
        "#######.",
        "##..###.",
        "........",
    ], mode=TracingMode.SPLIT_MERGE)

    assert tracker.contours == {
        1: [
            (0, 0), (6, 0),
            (0, 1), (1, 1), (4, 1), (6, 1),
            (1, 1), (0, 1), (6, 1), (4, 1),
        ],
    }


def test_split_merge_mode_closes_merged_run():
    """Merged-away run is closed on its last row."""
    tracker = trace([
        "##..##",
        "######",
        "......",
    ], mode=TracingMode.SPLIT_MERGE)

    assert tracker.contours[2] == [(4, 0), (5, 0), (5, 0), (4, 0)]
    assert tracker.contours[1][-2:] == [(5, 1), (0, 1)]


def test_ids_monotonic_in_scan_order():
    """Ids count up from 1 in order of first appearance."""
    rng = np.random.default_rng(1)
    mask = PixelSource(rng.choice(np.array([0, 255], dtype=np.uint8), size=(30, 40)))

    for mode in TracingMode:
        contours = ContourTracer(mode).trace(mask).contours
        ids = sorted(contours)
        assert ids == list(range(1, len(ids) + 1))

        first_points = [(contours[i][0][1], contours[i][0][0]) for i in ids]
        assert first_points == sorted(first_points)


def test_every_contour_closed():
    """Each contour ends with the reversed pair of its last run."""
    rng = np.random.default_rng(2)
    mask = PixelSource(rng.choice(np.array([0, 255], dtype=np.uint8), size=(25, 35)))

    tracker = ContourTracer().trace(mask)

    assert tracker.contours
    for points in tracker.contours.values():
        assert len(points) >= 4
        assert len(points) % 2 == 0
        assert points[-2:] == [points[-3], points[-4]]


def test_split_merge_closes_every_series():
    """Open and close pairs balance in split/merge mode too."""
    rng = np.random.default_rng(4)
    mask = PixelSource(rng.choice(np.array([0, 255], dtype=np.uint8), size=(25, 35)))

    tracker = ContourTracer(TracingMode.SPLIT_MERGE).trace(mask)

    assert tracker.active == []
    for points in tracker.contours.values():
        assert len(points) % 2 == 0


def test_empty_mask_has_no_contours():
    """All-white mask traces nothing."""
    tracker = trace(["....", "...."])

    assert tracker.contours == {}
    assert tracker.summary.contour_count == 0
    assert tracker.summary.rows_scanned == 2


def test_origin_offset_points():
    """Points use absolute coordinates."""
    data = np.array([[255, 0]], dtype=np.uint8)

    tracker = ContourTracer().trace(PixelSource(data, origin=(10, 20)))

    assert tracker.contours[1] == [(11, 20), (11, 20), (11, 20), (11, 20)]


def test_summary_counts():
    """Summary reports contours, points and rows."""
    tracker = trace(["#.#", "..."])

    summary = tracker.summary
    assert summary.contour_count == 2
    assert summary.point_count == 8
    assert summary.rows_scanned == 2


def test_branches_created_in_pairs():
    """A started series carries left and right branches of one id."""
    tracker = ContourTracker()
    tracker.feed_row([RowSegment(0, 2, 0)], 0)

    series = tracker.active[0]
    assert series.left_branch.id == series.right_branch.id == 1
    assert series.left_branch.side == Side.LEFT
    assert series.right_branch.side == Side.RIGHT

    tracker.feed_row([RowSegment(1, 3, 1)], 1)
    assert tracker.active[0].left_branch is series.left_branch


def test_feed_after_finish_fails():
    """Finished tracker rejects more rows."""
    tracker = ContourTracker()
    tracker.finish()

    with pytest.raises(RuntimeError):
        tracker.feed_row([], 0)


def test_arena_allocates_from_one():
    """Arena ids start at 1 and lists are append-only."""
    arena = ContourArena()
    first, second = arena.allocate(), arena.allocate()
    arena.append(first, (0, 0), (1, 0))

    assert (first, second) == (1, 2)
    assert arena.points(1) == [(0, 0), (1, 0)]
    assert arena.points(2) == []
    assert arena.point_count == 2


def test_trace_already_cancelled():
    """Tracing polls the token before the first row."""
    token = CancellationToken()
    token.cancel()

    with pytest.raises(OperationCancelled):
        ContourTracer().trace(mask_from_rows(["#"]), token)
