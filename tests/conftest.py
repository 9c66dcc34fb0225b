"""共通フィクスチャ。

- 乱数シード固定
- フレームの小さな木（world → body → sensor、別ルート other_world）
- 代表的なポリゴン試料（単位正方形・2 点の線分・空）
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from frames import ReferenceFrame, RigidTransform2D
from polygon import FrameConvexPolygon2D


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def world() -> ReferenceFrame:
    return ReferenceFrame("world")


@pytest.fixture()
def body(world: ReferenceFrame) -> ReferenceFrame:
    return ReferenceFrame("body", world, RigidTransform2D(yaw=math.pi / 2, translation=(1.0, 2.0)))


@pytest.fixture()
def sensor(body: ReferenceFrame) -> ReferenceFrame:
    return ReferenceFrame("sensor", body, RigidTransform2D(yaw=-0.3, translation=(0.5, 0.0)))


@pytest.fixture()
def other_world() -> ReferenceFrame:
    return ReferenceFrame("other_world")


@pytest.fixture()
def unit_square(world: ReferenceFrame) -> FrameConvexPolygon2D:
    return FrameConvexPolygon2D(world, [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])


@pytest.fixture()
def segment_polygon(world: ReferenceFrame) -> FrameConvexPolygon2D:
    return FrameConvexPolygon2D(world, [(0.0, 0.0), (1.0, 0.0)])


@pytest.fixture()
def empty_polygon(world: ReferenceFrame) -> FrameConvexPolygon2D:
    poly = FrameConvexPolygon2D(world)
    poly.update()
    return poly
