from __future__ import annotations

import math

import pytest

import api
from api import (
    FrameConvexPolygon2D,
    FrameMismatchError,
    FramePoint2D,
    ReferenceFrame,
    RigidTransform2D,
)


@pytest.mark.smoke
def test_public_names_are_exported() -> None:
    for name in api.__all__:
        assert hasattr(api, name), name
    assert isinstance(api.__version__, str)


@pytest.mark.smoke
def test_end_to_end_support_polygon() -> None:
    world = ReferenceFrame("world")
    foot = ReferenceFrame("foot", world, RigidTransform2D(yaw=math.pi / 2, translation=(1.0, 0.0)))
    support = FrameConvexPolygon2D(world)
    support.add_vertices_matching_frame(
        [FramePoint2D(foot, 0.0, 0.0), FramePoint2D(foot, 1.0, 0.0), FramePoint2D(foot, 0.0, 1.0)]
    )
    support.update()
    assert support.area == pytest.approx(0.5)
    assert support.is_point_inside(FramePoint2D(world, 0.8, 0.2))
    with pytest.raises(FrameMismatchError):
        support.is_point_inside(FramePoint2D(foot, 0.1, 0.1))
