from __future__ import annotations

import math

import numpy as np
import pytest

from common.errors import FrameMismatchError, FrameTreeError
from frames import (
    FixedFramePoint2D,
    FixedFrameVector2D,
    FramePoint2D,
    FrameVector2D,
    ReferenceFrame,
    assign_output_frame,
    check_frame_match,
)
from frames.tuples import FrameTuple2D, points_from_array


def test_strict_ops_reject_other_frame_and_leave_value(world: ReferenceFrame, body: ReferenceFrame) -> None:
    p = FramePoint2D(world, 1.0, 2.0)
    q = FramePoint2D(body, 3.0, 4.0)
    for op in (p.add, p.sub, p.set, p.distance):
        with pytest.raises(FrameMismatchError):
            op(q)
    assert p.xy() == (1.0, 2.0)


def test_untagged_operands_are_trusted(world: ReferenceFrame) -> None:
    p = FramePoint2D(world, 1.0, 2.0)
    p.add((1.0, 1.0))
    p.add(np.array([0.5, 0.5]))
    assert p.xy() == (2.5, 3.5)
    check_frame_match(world, (0.0, 0.0), [1.0, 2.0])


def test_point_and_vector_arithmetic(world: ReferenceFrame) -> None:
    a = FixedFramePoint2D(world, 0.0, 0.0)
    b = FixedFramePoint2D(world, 3.0, 4.0)
    assert a.distance(b) == pytest.approx(5.0)
    assert b.distance_from_origin() == pytest.approx(5.0)
    m = FramePoint2D(world)
    m.interpolate(a, b, 0.5)
    assert m.xy() == pytest.approx((1.5, 2.0))

    v = FixedFrameVector2D(world, 3.0, 4.0)
    w = FixedFrameVector2D(world, 1.0, 0.0)
    assert v.norm() == pytest.approx(5.0)
    assert v.dot(w) == pytest.approx(3.0)
    assert w.cross(v) == pytest.approx(4.0)
    v.normalize()
    assert v.xy() == pytest.approx((0.6, 0.8))
    z = FrameVector2D(world)
    z.normalize()
    assert z.contains_nan()


def test_set_matching_frame_transforms(world: ReferenceFrame, body: ReferenceFrame) -> None:
    target = FixedFramePoint2D(world)
    target.set_matching_frame(FramePoint2D(body, 1.0, 0.0))
    assert target.frame is world
    assert target.xy() == pytest.approx((1.0, 3.0))

    vec = FixedFrameVector2D(world)
    vec.set_matching_frame(FrameVector2D(body, 1.0, 0.0))
    assert vec.xy() == pytest.approx((0.0, 1.0))


def test_change_frame_round_trip(world: ReferenceFrame, sensor: ReferenceFrame) -> None:
    p = FramePoint2D(sensor, 0.7, -0.2)
    p.change_frame(world)
    assert p.frame is world
    p.change_frame(sensor)
    assert p.xy() == pytest.approx((0.7, -0.2))


def test_set_including_frame_forms(world: ReferenceFrame, body: ReferenceFrame) -> None:
    p = FramePoint2D(world, 1.0, 1.0)
    p.set_including_frame(FramePoint2D(body, 2.0, 3.0))
    assert p.frame is body and p.xy() == (2.0, 3.0)
    p.set_including_frame(world, 5.0, 6.0)
    assert p.frame is world and p.xy() == (5.0, 6.0)
    with pytest.raises(TypeError):
        p.set_including_frame(world)


def test_fixed_tuple_has_no_relabel(world: ReferenceFrame) -> None:
    p = FixedFramePoint2D(world)
    assert not hasattr(p, "set_reference_frame")
    assert not hasattr(p, "change_frame")


def test_assign_output_frame_is_all_or_nothing(world: ReferenceFrame, body: ReferenceFrame) -> None:
    movable = FramePoint2D(body)
    fixed = FixedFramePoint2D(body)
    with pytest.raises(FrameMismatchError):
        assign_output_frame(world, movable, fixed)
    assert movable.frame is body
    assign_output_frame(world, movable)
    assert movable.frame is world


def test_equality_semantics(world: ReferenceFrame, body: ReferenceFrame) -> None:
    a = FramePoint2D(world, 1.0, 2.0)
    assert a == FramePoint2D(world, 1.0, 2.0)
    assert a != FramePoint2D(body, 1.0, 2.0)
    assert a.epsilon_equals(FramePoint2D(world, 1.0 + 1e-9, 2.0), 1e-8)
    assert not a.epsilon_equals(FramePoint2D(body, 1.0, 2.0), 1e-8)
    assert a.geometrically_equals(FramePoint2D(world, 1.0, 2.0 + 1e-9), 1e-8)
    with pytest.raises(FrameMismatchError):
        a.geometrically_equals(FramePoint2D(body, 1.0, 2.0), 1e-8)
    with pytest.raises(TypeError):
        hash(a)


def test_points_from_array(world: ReferenceFrame) -> None:
    pts = points_from_array(world, np.array([[0.0, 1.0], [2.0, 3.0]]))
    assert [p.xy() for p in pts] == [(0.0, 1.0), (2.0, 3.0)]
    assert all(p.frame is world for p in pts)
    assert math.isclose(pts[1][0], 2.0)


def test_frameless_tuple_is_relabelled_without_transform(world: ReferenceFrame, body: ReferenceFrame) -> None:
    p = FramePoint2D(None, 1.0, 2.0)
    p.change_frame(world)
    assert p.frame is world
    assert p.xy() == (1.0, 2.0)

    q = FramePoint2D(body)
    q.set_matching_frame(FrameVector2D(None, 3.0, 4.0))
    assert q.frame is body
    assert q.xy() == (3.0, 4.0)


def test_tuple_cannot_be_expressed_without_frame(body: ReferenceFrame) -> None:
    q = FramePoint2D(None, 5.0, 5.0)
    with pytest.raises(FrameTreeError):
        q.set_matching_frame(FramePoint2D(body, 1.0, 0.0))
    assert q.xy() == (5.0, 5.0)

    v = FrameVector2D(body, 1.0, 0.0)
    with pytest.raises(FrameTreeError):
        v.change_frame(None)
    assert v.frame is body
    assert v.xy() == (1.0, 0.0)


def test_transforms_are_defined_by_point_and_vector_kinds(world: ReferenceFrame, body: ReferenceFrame) -> None:
    assert "apply_transform" not in vars(FrameTuple2D)
    assert "apply_inverse_transform" not in vars(FrameTuple2D)
    p = FixedFramePoint2D(body, 1.0, 0.0)
    v = FixedFrameVector2D(body, 1.0, 0.0)
    t = body.transform_to_desired_frame(world)
    p.apply_transform(t)
    v.apply_transform(t)
    assert p.xy() == pytest.approx((1.0, 3.0))
    assert v.xy() == pytest.approx((0.0, 1.0))
