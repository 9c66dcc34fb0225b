"""
どこで: `api` 入口（高レベル公開 API）。
何を: フレーム・フレーム付き値・凸多角形・例外・ロギング補助を単一名前空間から再輸出する。
なぜ: 利用者が内部のパッケージ構成を意識せず、フレームの構築→ポリゴン構築→問い合わせまで完結できるようにするため。

Usage:
    from api import ReferenceFrame, RigidTransform2D, FramePoint2D, FrameConvexPolygon2D

    world = ReferenceFrame("world")
    foot = ReferenceFrame("foot", world, RigidTransform2D(yaw=0.1, translation=(0.3, 0.0)))

    support = FrameConvexPolygon2D(foot, [(0, 0), (0.2, 0), (0.2, 0.1), (0, 0.1)])
    support.is_point_inside(FramePoint2D(foot, 0.1, 0.05))   # True

    merged = FrameConvexPolygon2D(world)
    merged.add_vertices_matching_frame(support)   # foot → world へ変換して追加
    merged.update()
"""

from common.errors import (
    EmptyPolygonError,
    FrameMismatchError,
    FrameTreeError,
    GeometryError,
    StalePolygonError,
)
from common.logging import setup_default_logging
from frames import (
    FixedFramePoint2D,
    FixedFrameVector2D,
    FrameLine2D,
    FrameLineSegment2D,
    FrameOrientation2D,
    FramePoint2D,
    FrameVector2D,
    ReferenceFrame,
    RigidTransform2D,
)
from polygon import FrameConvexPolygon2D, from_shapely, offset_copy, to_shapely

__all__ = [
    # フレーム
    "ReferenceFrame",
    "RigidTransform2D",
    # フレーム付き値
    "FixedFramePoint2D",
    "FixedFrameVector2D",
    "FramePoint2D",
    "FrameVector2D",
    "FrameOrientation2D",
    "FrameLine2D",
    "FrameLineSegment2D",
    # 凸多角形
    "FrameConvexPolygon2D",
    "to_shapely",
    "from_shapely",
    "offset_copy",
    # 例外
    "GeometryError",
    "FrameMismatchError",
    "StalePolygonError",
    "FrameTreeError",
    "EmptyPolygonError",
    # ロギング
    "setup_default_logging",
]

# バージョン情報
__version__ = "2026.10"
