"""
どこで: `polygon` パッケージ。
何を: フレーム付き凸多角形エンジン `FrameConvexPolygon2D` と Shapely 連携。
なぜ: 凸包の維持と幾何問い合わせを、フレーム整合プロトコルの上で提供するため。
"""

from .convex_polygon import FrameConvexPolygon2D
from .interop import from_shapely, offset_copy, to_shapely

__all__ = ["FrameConvexPolygon2D", "to_shapely", "from_shapely", "offset_copy"]
