from __future__ import annotations

import math

import pytest
from shapely.geometry import LineString, MultiPoint, Point, Polygon

from common.errors import StalePolygonError
from frames import ReferenceFrame
from polygon import FrameConvexPolygon2D, from_shapely, offset_copy, to_shapely


def test_to_shapely_by_vertex_count(
    unit_square: FrameConvexPolygon2D,
    segment_polygon: FrameConvexPolygon2D,
    empty_polygon: FrameConvexPolygon2D,
    world: ReferenceFrame,
) -> None:
    geom = to_shapely(unit_square)
    assert isinstance(geom, Polygon) and geom.area == pytest.approx(1.0)
    assert isinstance(to_shapely(segment_polygon), LineString)
    assert isinstance(to_shapely(FrameConvexPolygon2D(world, [(2.0, 3.0)])), Point)
    assert to_shapely(empty_polygon).is_empty


def test_to_shapely_requires_update(world: ReferenceFrame) -> None:
    poly = FrameConvexPolygon2D(world)
    poly.add_vertex((0.0, 0.0))
    with pytest.raises(StalePolygonError):
        to_shapely(poly)


def test_from_shapely_takes_convex_hull(world: ReferenceFrame) -> None:
    geom = MultiPoint([(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0), (1.0, 1.0)])
    poly = from_shapely(world, geom)
    assert poly.frame is world
    assert poly.is_up_to_date
    assert poly.number_of_vertices == 4
    assert poly.area == pytest.approx(4.0)


def test_offset_mitre_grows_square(unit_square: FrameConvexPolygon2D) -> None:
    grown = offset_copy(unit_square, 0.5)
    assert grown.frame is unit_square.frame
    assert grown.number_of_vertices == 4
    assert grown.area == pytest.approx(4.0)
    assert grown.vertex(0).xy() == pytest.approx((-0.5, 1.5))


def test_offset_round_and_shrink(unit_square: FrameConvexPolygon2D) -> None:
    rounded = offset_copy(unit_square, 0.5, join="round", segments_per_circle=16)
    assert 3.0 + math.pi / 4 - 0.02 < rounded.area < 3.0 + math.pi / 4
    shrunk = offset_copy(unit_square, -0.25)
    assert shrunk.area == pytest.approx(0.25)
    collapsed = offset_copy(unit_square, -1.0)
    assert collapsed.is_up_to_date and collapsed.is_empty


def test_offset_rejects_unknown_join(unit_square: FrameConvexPolygon2D) -> None:
    with pytest.raises(ValueError):
        offset_copy(unit_square, 0.1, join="square")
