"""
どこで: `common.errors`
何を: 幾何カーネル全体で共有する例外階層を定義する。
なぜ: フレーム不一致・未更新ポリゴンなど「呼び出し側の誤用」を型で区別し、
      捕捉側が回復方法（matching-frame 版で再試行、update() の呼び忘れ修正など）を選べるようにするため。
"""

from __future__ import annotations

from typing import Any


class GeometryError(RuntimeError):
    """幾何カーネルが送出する例外の基底。"""


class FrameMismatchError(GeometryError):
    """厳格な演算でオペランドの参照フレームが一致しなかった。

    送出は数値計算・変更の前に行われ、レシーバとオペランドは変更されない。

    Attributes
    ----------
    expected : Any
        演算の所有者（通常はレシーバ）のフレーム。
    actual : Any
        不一致だったオペランドのフレーム。
    """

    def __init__(self, expected: Any, actual: Any, message: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        if message is None:
            message = f"frame mismatch: expected {_frame_name(expected)}, got {_frame_name(actual)}"
        super().__init__(message)


class StalePolygonError(GeometryError):
    """`update()` 前のポリゴンに問い合わせた（頂点編集後の呼び忘れ）。"""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "polygon vertices were edited since the last update(); call update() before querying"
        )


class FrameTreeError(GeometryError):
    """ルートの異なるフレーム間で変換を要求した。"""


class EmptyPolygonError(GeometryError):
    """頂点を持たないポリゴンでは定義できない操作を呼んだ。"""


def _frame_name(frame: Any) -> str:
    name = getattr(frame, "name", None)
    return repr(name) if name is not None else repr(frame)


__all__ = [
    "GeometryError",
    "FrameMismatchError",
    "StalePolygonError",
    "FrameTreeError",
    "EmptyPolygonError",
]
