from __future__ import annotations

import pytest

from common.errors import FrameMismatchError, FrameTreeError
from frames import (
    FixedFramePoint2D,
    FrameLine2D,
    FrameLineSegment2D,
    FramePoint2D,
    ReferenceFrame,
)


def test_line_normalizes_direction_and_rejects_zero(world: ReferenceFrame) -> None:
    line = FrameLine2D(world, (0.0, 0.0), (2.0, 0.0))
    assert line.direction_xy() == (1.0, 0.0)
    with pytest.raises(ValueError):
        FrameLine2D(world, (0.0, 0.0), (0.0, 0.0))


def test_line_point_queries(world: ReferenceFrame) -> None:
    line = FrameLine2D(world, (0.0, 0.0), (1.0, 0.0))
    assert line.distance(FramePoint2D(world, 3.0, 4.0)) == pytest.approx(4.0)
    assert line.is_point_on_left_side((0.0, 1.0))
    assert line.is_point_on_right_side((0.0, -1.0))
    assert line.is_point_on_line((7.0, 0.0))
    proj = line.orthogonal_projection_copy(FramePoint2D(world, 3.0, 4.0))
    assert proj is not None and proj.xy() == pytest.approx((3.0, 0.0))
    assert line.point_on_line_given_parameter(2.5).xy() == pytest.approx((2.5, 0.0))


def test_line_projection_relabels_movable_output(world: ReferenceFrame, body: ReferenceFrame) -> None:
    line = FrameLine2D(world, (0.0, 0.0), (1.0, 0.0))
    out = FramePoint2D(body)
    assert line.orthogonal_projection(FramePoint2D(world, 2.0, 2.0), out)
    assert out.frame is world
    assert out.xy() == pytest.approx((2.0, 0.0))
    with pytest.raises(FrameMismatchError):
        line.orthogonal_projection(FramePoint2D(world, 2.0, 2.0), FixedFramePoint2D(body))


def test_line_in_place_projection(world: ReferenceFrame) -> None:
    line = FrameLine2D(world, (0.0, 1.0), (1.0, 0.0))
    p = FramePoint2D(world, 4.0, -3.0)
    line.orthogonal_projection(p)
    assert p.xy() == pytest.approx((4.0, 1.0))


def test_line_line_intersection(world: ReferenceFrame, body: ReferenceFrame) -> None:
    a = FrameLine2D(world, (0.0, 0.0), (1.0, 0.0))
    b = FrameLine2D(world, (1.0, -1.0), (0.0, 1.0))
    hit = a.intersection_with_copy(b)
    assert hit is not None and hit.xy() == pytest.approx((1.0, 0.0))
    assert a.intersection_with_copy(FrameLine2D(world, (0.0, 1.0), (-1.0, 0.0))) is None
    with pytest.raises(FrameMismatchError):
        a.intersection_with_copy(FrameLine2D(body, (1.0, -1.0), (0.0, 1.0)))


def test_line_from_two_points_checks_frames(world: ReferenceFrame, body: ReferenceFrame) -> None:
    line = FrameLine2D.from_two_points(FramePoint2D(world, 1.0, 1.0), FramePoint2D(world, 1.0, 3.0))
    assert line.point_xy() == (1.0, 1.0)
    assert line.direction_xy() == pytest.approx((0.0, 1.0))
    with pytest.raises(FrameMismatchError):
        FrameLine2D.from_two_points(FramePoint2D(world), FramePoint2D(body, 1.0, 0.0))


def test_line_collinear_and_perpendicular(world: ReferenceFrame) -> None:
    a = FrameLine2D(world, (0.0, 0.0), (1.0, 1.0))
    b = FrameLine2D(world, (3.0, 3.0), (-2.0, -2.0))
    assert a.is_collinear(b)
    assert a.geometrically_equals(b, 1e-9)
    assert not a.equals(b)
    perp = a.perpendicular_line_through_point((2.0, 0.0))
    assert perp.point_xy() == (2.0, 0.0)
    assert perp.direction_xy() == pytest.approx((-(0.5 ** 0.5), 0.5 ** 0.5))


def test_line_change_frame(world: ReferenceFrame, body: ReferenceFrame) -> None:
    line = FrameLine2D(body, (0.0, 0.0), (1.0, 0.0))
    line.change_frame(world)
    assert line.frame is world
    assert line.point_xy() == pytest.approx((1.0, 2.0))
    assert line.direction_xy() == pytest.approx((0.0, 1.0))


def test_segment_basics(world: ReferenceFrame) -> None:
    seg = FrameLineSegment2D(world, (0.0, 0.0), (2.0, 0.0))
    assert seg.length == pytest.approx(2.0)
    assert seg.midpoint().xy() == (1.0, 0.0)
    assert seg.direction().xy() == (1.0, 0.0)
    assert seg.distance((3.0, 0.0)) == pytest.approx(1.0)
    assert seg.percentage_along((1.0, 5.0)) == pytest.approx(0.5)
    assert seg.is_point_on_segment((0.5, 0.0))
    assert seg.point_between_endpoints_given_percentage(0.25).xy() == (0.5, 0.0)
    zero = FrameLineSegment2D(world, (1.0, 1.0), (1.0, 1.0))
    assert zero.direction().contains_nan()


def test_segment_projection_clamps(world: ReferenceFrame) -> None:
    seg = FrameLineSegment2D(world, (0.0, 0.0), (2.0, 0.0))
    p = FramePoint2D(world, 5.0, 1.0)
    seg.orthogonal_projection(p)
    assert p.xy() == (2.0, 0.0)
    q = seg.orthogonal_projection_copy((1.0, -3.0))
    assert q.frame is world and q.xy() == pytest.approx((1.0, 0.0))


def test_segment_intersection(world: ReferenceFrame, body: ReferenceFrame) -> None:
    seg = FrameLineSegment2D(world, (0.0, 0.0), (2.0, 0.0))
    hit = seg.intersection_with_copy(FrameLineSegment2D(world, (1.0, -1.0), (1.0, 1.0)))
    assert hit is not None and hit.xy() == pytest.approx((1.0, 0.0))
    assert seg.intersection_with_copy(FrameLineSegment2D(world, (3.0, -1.0), (3.0, 1.0))) is None
    with pytest.raises(FrameMismatchError):
        seg.intersection_with_copy(FrameLineSegment2D(body, (1.0, -1.0), (1.0, 1.0)))


def test_segment_set_is_strict(world: ReferenceFrame, body: ReferenceFrame) -> None:
    seg = FrameLineSegment2D(world, (0.0, 0.0), (1.0, 0.0))
    with pytest.raises(FrameMismatchError):
        seg.set(FramePoint2D(world, 5.0, 5.0), FramePoint2D(body, 6.0, 6.0))
    assert seg.endpoints_xy() == (0.0, 0.0, 1.0, 0.0)


def test_segment_matching_frame_and_equality(world: ReferenceFrame, body: ReferenceFrame) -> None:
    seg = FrameLineSegment2D(world)
    seg.set_matching_frame(FrameLineSegment2D(body, (0.0, 0.0), (1.0, 0.0)))
    assert seg.frame is world
    assert seg.endpoints_xy() == pytest.approx((1.0, 2.0, 1.0, 3.0))

    flipped = FrameLineSegment2D(world, (1.0, 3.0), (1.0, 2.0))
    assert seg.geometrically_equals(flipped, 1e-9)
    assert not seg.epsilon_equals(flipped, 1e-9)
    flipped.flip_direction()
    assert seg.epsilon_equals(flipped, 1e-9)
    with pytest.raises(FrameMismatchError):
        seg.geometrically_equals(FrameLineSegment2D(body), 1e-9)


def test_frameless_line_and_segment_frames(world: ReferenceFrame, body: ReferenceFrame) -> None:
    line = FrameLine2D(None, (1.0, 2.0), (0.0, 1.0))
    line.change_frame(world)
    assert line.frame is world
    assert line.point_xy() == (1.0, 2.0)
    assert line.direction_xy() == (0.0, 1.0)

    target = FrameLine2D(None, (5.0, 5.0), (0.0, 1.0))
    with pytest.raises(FrameTreeError):
        target.set_matching_frame(FrameLine2D(body, (0.0, 0.0), (1.0, 0.0)))
    assert target.point_xy() == (5.0, 5.0)
    assert target.direction_xy() == (0.0, 1.0)

    segment = FrameLineSegment2D(None, (0.0, 0.0), (1.0, 1.0))
    segment.change_frame(body)
    assert segment.frame is body
    assert segment.endpoints_xy() == (0.0, 0.0, 1.0, 1.0)

    placed = FrameLineSegment2D(None, (2.0, 2.0), (3.0, 3.0))
    with pytest.raises(FrameTreeError):
        placed.set_matching_frame(FrameLineSegment2D(body, (0.0, 0.0), (1.0, 0.0)))
    assert placed.endpoints_xy() == (2.0, 2.0, 3.0, 3.0)
    with pytest.raises(FrameTreeError):
        segment.change_frame(None)
    assert segment.frame is body
