"""
どこで: `frames.tuples`
何を: フレーム付き 2D 点/ベクトル（固定フレーム版 `FixedFrame*` と可動フレーム版 `Frame*`）。
なぜ: 座標と「どのフレームで表現されているか」を常に対で持ち、異なるフレームの値を
      うっかり混ぜる演算を `FrameMismatchError` で即座に止めるため。

能力の対応:
- 読み取り: `frame`, `x`, `y`, `xy()`, `to_numpy()`, 比較系。
- 固定フレームの書き込み: `set`, `add`, `sub`, `scale`, `interpolate` など（すべて厳格検査）、
  `set_xy`（フレーム無しの座標: 信頼境界）、`set_matching_frame`（変換付き）。
- 可動フレーム: `set_reference_frame`, `set_including_frame`, `change_frame`。

補助関数 `read_xy` / `write_xy` は、フレーム付き値・素のシーケンス・numpy 配列を同じ形で読み書きする。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterator, Optional, Sequence

import numpy as np

from common.types import Vec2

from .protocol import FrameHolder, MovableFrameHolder, check_frame_match, transform_between
from .reference_frame import ReferenceFrame
from .transform import RigidTransform2D

logger = logging.getLogger(__name__)


def read_xy(value: Any) -> Vec2:
    """フレーム付きタプル/長さ 2 のシーケンス/形状 (2,) の配列から `(x, y)` を読む。"""
    if isinstance(value, FrameTuple2D):
        return value._x, value._y
    try:
        n = len(value)
    except TypeError:
        raise ValueError(f"expected a 2D point-like value, got {type(value).__name__}") from None
    if n != 2:
        raise ValueError(f"expected 2 coordinates, got {n}")
    return float(value[0]), float(value[1])


def write_xy(out: Any, x: float, y: float) -> None:
    """`out` に座標を書き込む（フレームは扱わない。呼び出し側で `assign_output_frame` 済みとする）。"""
    if isinstance(out, FrameTuple2D):
        out._x = float(x)
        out._y = float(y)
        return
    out[0] = x
    out[1] = y


class FrameTuple2D(FrameHolder):
    """フレーム付き 2 要素タプルの共通実装（固定フレーム）。"""

    __slots__ = ("_frame", "_x", "_y")

    def __init__(
        self, frame: Optional[ReferenceFrame] = None, x: float = 0.0, y: float = 0.0
    ) -> None:
        self._frame = frame
        self._x = float(x)
        self._y = float(y)

    # ── 読み取り ───────────────────────────────────
    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._x = float(value)

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self._y = float(value)

    def xy(self) -> Vec2:
        return self._x, self._y

    def to_numpy(self) -> np.ndarray:
        return np.array((self._x, self._y), dtype=np.float64)

    def __iter__(self) -> Iterator[float]:
        yield self._x
        yield self._y

    def __len__(self) -> int:
        return 2

    def __getitem__(self, index: int) -> float:
        return (self._x, self._y)[index]

    def contains_nan(self) -> bool:
        return math.isnan(self._x) or math.isnan(self._y)

    # ── 固定フレームの書き込み ─────────────────────
    def set(self, other: Any) -> None:
        """厳格: `other` の座標をコピーする。"""
        check_frame_match(self._frame, other)
        self._x, self._y = read_xy(other)

    def set_xy(self, x: float, y: float) -> None:
        """フレーム無しの座標を設定する（信頼境界: 検査しない）。"""
        self._x = float(x)
        self._y = float(y)

    def set_to_zero(self) -> None:
        self._x = 0.0
        self._y = 0.0

    def set_to_nan(self) -> None:
        self._x = math.nan
        self._y = math.nan

    def add(self, other: Any) -> None:
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        self._x += ox
        self._y += oy

    def sub(self, other: Any) -> None:
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        self._x -= ox
        self._y -= oy

    def scale(self, factor: float) -> None:
        self._x *= factor
        self._y *= factor

    def interpolate(self, a: Any, b: Any, alpha: float) -> None:
        """厳格: `(1 - alpha) * a + alpha * b` を自身に設定する。"""
        check_frame_match(self._frame, a, b)
        ax, ay = read_xy(a)
        bx, by = read_xy(b)
        self._x = (1.0 - alpha) * ax + alpha * bx
        self._y = (1.0 - alpha) * ay + alpha * by

    def set_matching_frame(self, other: "FrameTuple2D") -> None:
        """`other` を自身のフレームへ変換して設定する（matching-frame 版の `set`）。"""
        transform = transform_between(other._frame, self._frame)
        self._x, self._y = other._x, other._y
        if transform is not None:
            logger.debug(
                "matching frame: %s -> %s",
                getattr(other._frame, "name", None),
                getattr(self._frame, "name", None),
            )
            self.apply_transform(transform)

    # ── 比較 ───────────────────────────────────────
    def equals(self, other: Any) -> bool:
        """同一フレームかつ座標が完全一致（フレーム不一致は False）。"""
        if not isinstance(other, FrameTuple2D) or other._frame is not self._frame:
            return False
        return self._x == other._x and self._y == other._y

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def epsilon_equals(self, other: Any, epsilon: float) -> bool:
        """成分ごとの差が `epsilon` 以下（フレーム不一致は False）。"""
        if not isinstance(other, FrameTuple2D) or other._frame is not self._frame:
            return False
        return abs(self._x - other._x) <= epsilon and abs(self._y - other._y) <= epsilon

    def geometrically_equals(self, other: Any, epsilon: float) -> bool:
        """厳格: 差ベクトルの長さが `epsilon` 以下。"""
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        return math.hypot(self._x - ox, self._y - oy) <= epsilon

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        name = getattr(self._frame, "name", None)
        return f"{type(self).__name__}({self._x:.6g}, {self._y:.6g}) - {name}"


class FixedFramePoint2D(FrameTuple2D):
    """固定フレームの 2D 点。"""

    __slots__ = ()

    def distance_squared(self, other: Any) -> float:
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        return (self._x - ox) ** 2 + (self._y - oy) ** 2

    def distance(self, other: Any) -> float:
        """厳格: 2 点間の距離。"""
        return math.sqrt(self.distance_squared(other))

    def distance_from_origin(self) -> float:
        return math.hypot(self._x, self._y)

    def apply_transform(self, transform: RigidTransform2D) -> None:
        self._x, self._y = transform.transform_point(self._x, self._y)

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        self._x, self._y = transform.inverse_transform_point(self._x, self._y)

    def copy(self) -> "FramePoint2D":
        return FramePoint2D(self._frame, self._x, self._y)


class FixedFrameVector2D(FrameTuple2D):
    """固定フレームの 2D ベクトル（変換で並進を受けない）。"""

    __slots__ = ()

    def norm_squared(self) -> float:
        return self._x * self._x + self._y * self._y

    def norm(self) -> float:
        return math.hypot(self._x, self._y)

    def dot(self, other: Any) -> float:
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        return self._x * ox + self._y * oy

    def cross(self, other: Any) -> float:
        """厳格: `self × other`（z 成分）。"""
        check_frame_match(self._frame, other)
        ox, oy = read_xy(other)
        return self._x * oy - self._y * ox

    def normalize(self) -> None:
        """単位長に正規化する。長さ 0 では NaN になる。"""
        n = self.norm()
        if n == 0.0:
            self.set_to_nan()
            return
        self._x /= n
        self._y /= n

    def apply_transform(self, transform: RigidTransform2D) -> None:
        self._x, self._y = transform.transform_vector(self._x, self._y)

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        self._x, self._y = transform.inverse_transform_vector(self._x, self._y)

    def copy(self) -> "FrameVector2D":
        return FrameVector2D(self._frame, self._x, self._y)


class _MovableTupleMixin(MovableFrameHolder):
    __slots__ = ()

    def set_including_frame(self, *args: Any) -> None:
        """`set_including_frame(other)` または `set_including_frame(frame, x, y)`。"""
        if len(args) == 1 and isinstance(args[0], FrameTuple2D):
            other = args[0]
            self._frame = other._frame
            self._x, self._y = other._x, other._y
            return
        if len(args) == 3:
            frame, x, y = args
            self._frame = frame
            self._x = float(x)
            self._y = float(y)
            return
        raise TypeError("expected (frame_tuple) or (frame, x, y)")

    def change_frame(self, desired: ReferenceFrame) -> None:
        """座標を `desired` へ変換し、フレームを付け替える（フレーム無しの値は付け替えのみ）。"""
        transform = transform_between(self._frame, desired)
        if transform is not None:
            self.apply_transform(transform)
        self._frame = desired


class FramePoint2D(FixedFramePoint2D, _MovableTupleMixin):
    """可動フレームの 2D 点。出力コンテナとして渡すとフレームが付け替えられる。"""

    __slots__ = ()


class FrameVector2D(FixedFrameVector2D, _MovableTupleMixin):
    """可動フレームの 2D ベクトル。"""

    __slots__ = ()


def points_from_array(
    frame: Optional[ReferenceFrame], coords: Sequence[Sequence[float]] | np.ndarray
) -> list[FramePoint2D]:
    """`(N, 2)` の座標列からフレーム付き点のリストを作る。"""
    arr = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    return [FramePoint2D(frame, float(x), float(y)) for x, y in arr]


__all__ = [
    "FrameTuple2D",
    "FixedFramePoint2D",
    "FixedFrameVector2D",
    "FramePoint2D",
    "FrameVector2D",
    "read_xy",
    "write_xy",
    "points_from_array",
]
