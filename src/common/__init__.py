"""
どこで: `common` パッケージ。
何を: geometry/frames/polygon が共有する軽量基盤（設定・例外・ロギング補助・型エイリアス）。
なぜ: 下位層に集約して依存の向きを単純化し、循環を避けるため。
"""

from .errors import (
    EmptyPolygonError,
    FrameMismatchError,
    FrameTreeError,
    GeometryError,
    StalePolygonError,
)

__all__ = [
    "GeometryError",
    "FrameMismatchError",
    "StalePolygonError",
    "FrameTreeError",
    "EmptyPolygonError",
]
