from __future__ import annotations

import math

import numpy as np
import pytest

from geometry import polygon_ops as po

SQUARE2 = [(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)]
UNIT_CW = np.array([[0.0, 1.0], [1.0, 1.0], [1.0, 0.0], [0.0, 0.0]], dtype=np.float64)


def _hull(points, epsilon: float = 1e-7) -> np.ndarray:
    buf = np.zeros((max(1, len(points)) + 2, 2), dtype=np.float64)
    buf[: len(points)] = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    n = po.inplace_convex_hull(buf, len(points), epsilon)
    return buf[:n].copy()


def test_hull_removes_interior_and_orders_clockwise() -> None:
    hull = _hull(SQUARE2 + [(1.0, 1.0)])
    np.testing.assert_allclose(hull, [[0.0, 2.0], [2.0, 2.0], [2.0, 0.0], [0.0, 0.0]])


def test_hull_drops_collinear_boundary_points_and_keeps_extremes() -> None:
    hull = _hull([(1.0, 0.0)] + SQUARE2 + [(2.0, 1.0)])
    assert hull.shape == (4, 2)
    assert not any(np.allclose(v, (1.0, 0.0)) for v in hull)
    assert not any(np.allclose(v, (2.0, 1.0)) for v in hull)


def test_hull_degenerate_inputs() -> None:
    assert _hull([]).shape == (0, 2)
    np.testing.assert_allclose(_hull([(1.0, 1.0), (1.0, 1.0 + 1e-9), (1.0, 1.0)]), [[1.0, 1.0]])
    np.testing.assert_allclose(_hull([(2.0, 0.0), (1.0, 0.0), (0.0, 0.0)]), [[0.0, 0.0], [2.0, 0.0]])


def test_hull_keeps_first_occurrence_of_near_duplicates() -> None:
    np.testing.assert_allclose(_hull([(1e-8, 0.0), (0.0, 0.0)]), [[1e-8, 0.0]])
    np.testing.assert_allclose(_hull([(0.0, 0.0), (1e-8, 0.0)]), [[0.0, 0.0]])


def test_hull_is_idempotent() -> None:
    pts = np.random.rand(40, 2)
    once = _hull(pts)
    twice = _hull(once)
    np.testing.assert_array_equal(once, twice)


def test_area_and_centroid_is_area_weighted() -> None:
    hull = _hull([(0.0, 0.0), (4.0, 0.0), (4.0, 1.0), (0.0, 3.0)])
    area, cx, cy = po.area_and_centroid(hull, hull.shape[0])
    assert area == pytest.approx(8.0)
    assert (cx, cy) == pytest.approx((5.0 / 3.0, 13.0 / 12.0))


def test_area_and_centroid_degenerate() -> None:
    seg = np.array([[0.0, 0.0], [2.0, 0.0]])
    assert po.area_and_centroid(seg, 2) == pytest.approx((0.0, 1.0, 0.0))
    area, cx, cy = po.area_and_centroid(seg, 0)
    assert math.isnan(area) and math.isnan(cx) and math.isnan(cy)


def test_signed_distance_inside_outside_boundary() -> None:
    sq = _hull(SQUARE2)
    assert po.signed_distance(1.0, 1.0, sq, 4) == pytest.approx(-1.0)
    assert po.signed_distance(3.0, 1.0, sq, 4) == pytest.approx(1.0)
    assert po.signed_distance(3.0, 3.0, sq, 4) == pytest.approx(math.sqrt(2.0))
    assert po.signed_distance(2.0, 1.0, sq, 4) == 0.0
    assert math.isnan(po.signed_distance(0.0, 0.0, sq, 0))


def test_closest_vertex_tie_goes_to_lowest_index() -> None:
    sq = _hull(SQUARE2)
    assert po.closest_vertex_index_to_point(1.0, 1.0, sq, 4) == 0
    assert po.closest_vertex_index_to_point(1.0, 3.0, sq, 4) == 0
    assert po.closest_vertex_index_to_point(3.0, -1.0, sq, 4) == 2
    assert po.closest_vertex_index_to_point(0.0, 0.0, sq, 0) == -1


def test_closest_vertex_to_line_uses_perpendicular_distance() -> None:
    sq = _hull(SQUARE2)
    # 直線 x = 5（縦）に最も近いのは x = 2 の頂点のうち index の小さい (2, 2)
    assert po.closest_vertex_index_to_line(5.0, 0.0, 0.0, 1.0, sq, 4) == 1


def test_closest_edge_outside_and_inside() -> None:
    sq = _hull(SQUARE2)
    assert po.closest_edge_index_to_point(3.0, 1.0, sq, 4) == 1
    assert po.closest_edge_index_to_point(1.0, 1.5, sq, 4) == 0
    assert po.closest_edge_index_to_point(1.0, 1.5, sq, 1) == -1


def test_line_of_sight_from_side_and_corner() -> None:
    assert po.line_of_sight_start_index(5.0, 0.0, UNIT_CW, 4) == 1
    assert po.line_of_sight_end_index(5.0, 0.0, UNIT_CW, 4) == 2
    assert po.line_of_sight_start_index(2.0, 2.0, UNIT_CW, 4) == 0
    assert po.line_of_sight_end_index(2.0, 2.0, UNIT_CW, 4) == 2
    assert po.line_of_sight_start_index(0.5, 0.5, UNIT_CW, 4) == -1
    assert po.line_of_sight_end_index(0.5, 0.5, UNIT_CW, 4) == -1


def test_line_of_sight_degenerate() -> None:
    seg = np.array([[0.0, 0.0], [1.0, 0.0]])
    assert (po.line_of_sight_start_index(0.5, 1.0, seg, 2), po.line_of_sight_end_index(0.5, 1.0, seg, 2)) == (0, 1)
    assert (po.line_of_sight_start_index(0.5, -1.0, seg, 2), po.line_of_sight_end_index(0.5, -1.0, seg, 2)) == (1, 0)
    assert po.line_of_sight_start_index(0.5, 0.0, seg, 2) == -1
    assert po.line_of_sight_start_index(0.0, 0.0, seg, 1) == -1
    assert po.line_of_sight_start_index(3.0, 0.0, seg, 1) == 0
    assert po.line_of_sight_start_index(3.0, 0.0, seg, 0) == -1


def test_orthogonal_projection_cases() -> None:
    sq = _hull(SQUARE2)
    ok, x, y = po.orthogonal_projection(3.0, 1.0, sq, 4)
    assert ok and (x, y) == pytest.approx((2.0, 1.0))
    ok, _, _ = po.orthogonal_projection(1.0, 1.0, sq, 4)
    assert not ok
    ok, x, y = po.orthogonal_projection(5.0, 5.0, sq, 1)
    assert ok and (x, y) == (0.0, 2.0)
    ok, _, _ = po.orthogonal_projection(5.0, 5.0, sq, 0)
    assert not ok


def test_intersection_with_line_crossing_and_collinear_edge() -> None:
    count, x1, y1, x2, y2 = po.intersection_with_line(-1.0, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 2
    assert {(x1, y1), (x2, y2)} == {(1.0, 0.5), (0.0, 0.5)}

    count, x1, y1, x2, y2 = po.intersection_with_line(5.0, 0.0, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 2
    assert {(x1, y1), (x2, y2)} == {(1.0, 0.0), (0.0, 0.0)}


def test_intersection_with_line_touching_vertex_and_missing() -> None:
    count, x1, y1, _, _ = po.intersection_with_line(1.0, 1.0, 1.0, -1.0, UNIT_CW, 4, 1e-7)
    assert count == 1 and (x1, y1) == (1.0, 1.0)
    count, *_ = po.intersection_with_line(0.0, 3.0, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 0


def test_intersection_with_ray_filters_points_behind() -> None:
    count, x1, y1, _, _ = po.intersection_with_ray(0.5, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 1 and (x1, y1) == pytest.approx((1.0, 0.5))
    count, *_ = po.intersection_with_ray(2.0, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 0
    count, *_ = po.intersection_with_ray(-1.0, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert count == 2


def test_intersection_with_segment() -> None:
    count, x1, y1, _, _ = po.intersection_with_segment(-1.0, 0.5, 0.5, 0.5, UNIT_CW, 4, 1e-7)
    assert count == 1 and (x1, y1) == pytest.approx((0.0, 0.5))
    # 端点が辺上
    count, x1, y1, _, _ = po.intersection_with_segment(1.0, 0.5, 2.0, 0.5, UNIT_CW, 4, 1e-7)
    assert count == 1 and (x1, y1) == pytest.approx((1.0, 0.5))
    count, *_ = po.intersection_with_segment(0.2, 0.5, 0.8, 0.5, UNIT_CW, 4, 1e-7)
    assert count == 0


def test_closest_point_with_non_intersecting_ray() -> None:
    ok, x, y = po.closest_point_with_ray(3.0, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert ok and (x, y) == pytest.approx((1.0, 0.5))
    ok, _, _ = po.closest_point_with_ray(-1.0, 0.5, 1.0, 0.0, UNIT_CW, 4, 1e-7)
    assert not ok


def test_bounding_box() -> None:
    assert po.bounding_box(UNIT_CW, 4) == (0.0, 0.0, 1.0, 1.0)
    assert all(math.isnan(v) for v in po.bounding_box(UNIT_CW, 0))
