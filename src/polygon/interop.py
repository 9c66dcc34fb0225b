"""
どこで: `polygon.interop`
何を: `FrameConvexPolygon2D` と Shapely ジオメトリの相互変換、および Shapely `buffer` による
      凸多角形のオフセット（膨張/収縮）。
なぜ: 可視化・外部ツール連携や安全マージン付きの支持多角形計算を、凸包エンジンの規約
      （時計回り・up-to-date・フレーム付き）を保ったまま行うため。

- Shapely 側はフレームを持たないため、`from_shapely` では呼び出し側が座標のフレームを明示する。
- 変換結果は常に `update()` 済みのポリゴン（凸包）になる。
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from frames.reference_frame import ReferenceFrame

from .convex_polygon import FrameConvexPolygon2D

_JOIN_STYLES = ("round", "mitre", "bevel")


def to_shapely(polygon: FrameConvexPolygon2D) -> BaseGeometry:
    """頂点数に応じて `Polygon` / `LineString` / `Point` / 空 `Polygon` を返す。"""
    coords = np.array(polygon.vertices_view(), dtype=np.float64)
    n = coords.shape[0]
    if n == 0:
        return Polygon()
    if n == 1:
        return Point(coords[0])
    if n == 2:
        return LineString(coords)
    return Polygon(coords)


def _hull_coords(geom: BaseGeometry) -> np.ndarray:
    if geom.is_empty:
        return np.empty((0, 2), dtype=np.float64)
    hull = geom.convex_hull
    if isinstance(hull, Polygon):
        coords = np.array(hull.exterior.coords, dtype=np.float64)[:-1]
    else:
        coords = np.array(hull.coords, dtype=np.float64)
    return coords[:, :2]


def from_shapely(frame: Optional[ReferenceFrame], geom: BaseGeometry) -> FrameConvexPolygon2D:
    """任意の Shapely ジオメトリの凸包から、`frame` で表現されたポリゴンを作る。"""
    return FrameConvexPolygon2D(frame, _hull_coords(geom))


def offset_copy(
    polygon: FrameConvexPolygon2D,
    distance: float,
    *,
    join: str = "mitre",
    segments_per_circle: int = 8,
) -> FrameConvexPolygon2D:
    """Shapely の `buffer` で外側（正）/内側（負）へオフセットした新しいポリゴンを返す。

    Parameters
    ----------
    polygon : FrameConvexPolygon2D
        up-to-date のポリゴン（stale なら `StalePolygonError`）。
    distance : float
        オフセット距離。負で収縮し、潰れた場合は空ポリゴンになる。
    join : str, default 'mitre'
        角の処理。`'mitre'|'round'|'bevel'`。
    segments_per_circle : int, default 8
        `round` 時の円弧近似分割数（Shapely の resolution 相当）。
    """
    if join not in _JOIN_STYLES:
        raise ValueError(f"join must be one of {sorted(_JOIN_STYLES)}, got {join!r}")
    geom = to_shapely(polygon)
    if geom.is_empty:
        return FrameConvexPolygon2D(polygon.frame, np.empty((0, 2)))
    buffered = geom.buffer(
        float(distance),
        quad_segs=max(1, int(segments_per_circle)),
        join_style=join,
    )
    return from_shapely(polygon.frame, buffered)


__all__ = ["to_shapely", "from_shapely", "offset_copy"]
