"""
どこで: `frames.line_segment`
何を: フレーム付きの線分 `FrameLineSegment2D`（始点 → 終点）。
なぜ: ポリゴンの辺の取り出しや線分との交差を、フレーム検査付きで扱うため。
"""

from __future__ import annotations

import math
from typing import Any, Optional

from geometry import line_ops

from .protocol import (
    MovableFrameHolder,
    assign_output_frame,
    check_frame_match,
    transform_between,
)
from .reference_frame import ReferenceFrame
from .transform import RigidTransform2D
from .tuples import FramePoint2D, FrameVector2D, read_xy, write_xy


class FrameLineSegment2D(MovableFrameHolder):
    """フレーム付きの線分。長さ 0 の線分も許容する（射影は始点になる）。"""

    __slots__ = ("_frame", "_ax", "_ay", "_bx", "_by")

    def __init__(
        self,
        frame: Optional[ReferenceFrame] = None,
        first: Any = (0.0, 0.0),
        second: Any = (0.0, 0.0),
    ) -> None:
        self._frame = frame
        check_frame_match(frame, first, second)
        self._ax, self._ay = read_xy(first)
        self._bx, self._by = read_xy(second)

    # ── 読み取り ───────────────────────────────────
    @property
    def first_endpoint(self) -> FramePoint2D:
        return FramePoint2D(self._frame, self._ax, self._ay)

    @property
    def second_endpoint(self) -> FramePoint2D:
        return FramePoint2D(self._frame, self._bx, self._by)

    def endpoints_xy(self) -> tuple[float, float, float, float]:
        return self._ax, self._ay, self._bx, self._by

    @property
    def length(self) -> float:
        return math.hypot(self._bx - self._ax, self._by - self._ay)

    def midpoint(self, out: Any = None) -> FramePoint2D:
        target = out if out is not None else FramePoint2D(self._frame)
        assign_output_frame(self._frame, target)
        write_xy(target, 0.5 * (self._ax + self._bx), 0.5 * (self._ay + self._by))
        return target

    def direction(self, normalize: bool = True, out: Any = None) -> FrameVector2D:
        """始点 → 終点のベクトル（`normalize` で単位化、長さ 0 なら NaN）。"""
        target = out if out is not None else FrameVector2D(self._frame)
        assign_output_frame(self._frame, target)
        dx = self._bx - self._ax
        dy = self._by - self._ay
        if normalize:
            n = math.hypot(dx, dy)
            if n == 0.0:
                dx = dy = math.nan
            else:
                dx /= n
                dy /= n
        write_xy(target, dx, dy)
        return target

    # ── 設定 ───────────────────────────────────────
    def set(self, first: Any, second: Any) -> None:
        check_frame_match(self._frame, first, second)
        ax, ay = read_xy(first)
        self._bx, self._by = read_xy(second)
        self._ax, self._ay = ax, ay

    def set_matching_frame(self, other: "FrameLineSegment2D") -> None:
        transform = transform_between(other._frame, self._frame)
        self._ax, self._ay, self._bx, self._by = other.endpoints_xy()
        if transform is not None:
            self.apply_transform(transform)

    def set_including_frame(self, other: "FrameLineSegment2D") -> None:
        self._frame = other._frame
        self._ax, self._ay, self._bx, self._by = other.endpoints_xy()

    def flip_direction(self) -> None:
        self._ax, self._ay, self._bx, self._by = self._bx, self._by, self._ax, self._ay

    # ── 点との問い合わせ ───────────────────────────
    def distance(self, point: Any) -> float:
        check_frame_match(self._frame, point)
        x, y = read_xy(point)
        return line_ops.distance_point_to_segment(x, y, self._ax, self._ay, self._bx, self._by)

    def percentage_along(self, point: Any) -> float:
        """厳格: 点の射影位置を割合で返す（0 で始点、1 で終点、範囲外も可）。"""
        check_frame_match(self._frame, point)
        x, y = read_xy(point)
        return line_ops.percentage_along_segment(x, y, self._ax, self._ay, self._bx, self._by)

    def is_point_on_segment(self, point: Any, epsilon: float = 1e-8) -> bool:
        return self.distance(point) <= epsilon

    def point_between_endpoints_given_percentage(
        self, percentage: float, out: Any = None
    ) -> FramePoint2D:
        target = out if out is not None else FramePoint2D(self._frame)
        assign_output_frame(self._frame, target)
        write_xy(
            target,
            self._ax + percentage * (self._bx - self._ax),
            self._ay + percentage * (self._by - self._ay),
        )
        return target

    def orthogonal_projection(self, point: Any, out: Any = None) -> bool:
        """点を線分へ射影する（端点でクランプ）。`out` 省略時は `point` を書き換える。"""
        target = point if out is None else out
        check_frame_match(self._frame, point)
        assign_output_frame(self._frame, target)
        x, y = read_xy(point)
        qx, qy = line_ops.orthogonal_projection_on_segment(
            x, y, self._ax, self._ay, self._bx, self._by
        )
        write_xy(target, qx, qy)
        return True

    def orthogonal_projection_copy(self, point: Any) -> FramePoint2D:
        out = FramePoint2D(self._frame)
        self.orthogonal_projection(point, out)
        return out

    # ── 線分との問い合わせ ─────────────────────────
    def intersection_with(self, other: "FrameLineSegment2D", out: Any) -> bool:
        """厳格: 2 線分の交点。交わらなければ False（`out` は変更しない）。"""
        check_frame_match(self._frame, other)
        assign_output_frame(self._frame, out)
        ok, x, y = line_ops.intersection_between_two_segments(
            self._ax, self._ay, self._bx, self._by, other._ax, other._ay, other._bx, other._by
        )
        if not ok:
            return False
        write_xy(out, x, y)
        return True

    def intersection_with_copy(self, other: "FrameLineSegment2D") -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        if not self.intersection_with(other, out):
            return None
        return out

    # ── フレーム変換 ───────────────────────────────
    def apply_transform(self, transform: RigidTransform2D) -> None:
        self._ax, self._ay = transform.transform_point(self._ax, self._ay)
        self._bx, self._by = transform.transform_point(self._bx, self._by)

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        self._ax, self._ay = transform.inverse_transform_point(self._ax, self._ay)
        self._bx, self._by = transform.inverse_transform_point(self._bx, self._by)

    def change_frame(self, desired: ReferenceFrame) -> None:
        transform = transform_between(self._frame, desired)
        if transform is not None:
            self.apply_transform(transform)
        self._frame = desired

    # ── 比較 ───────────────────────────────────────
    def equals(self, other: Any) -> bool:
        return (
            isinstance(other, FrameLineSegment2D)
            and other._frame is self._frame
            and self.endpoints_xy() == other.endpoints_xy()
        )

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def epsilon_equals(self, other: Any, epsilon: float) -> bool:
        if not isinstance(other, FrameLineSegment2D) or other._frame is not self._frame:
            return False
        return all(
            abs(u - v) <= epsilon for u, v in zip(self.endpoints_xy(), other.endpoints_xy())
        )

    def geometrically_equals(self, other: "FrameLineSegment2D", epsilon: float) -> bool:
        """厳格: 端点の順序を問わず同じ線分か。"""
        check_frame_match(self._frame, other)

        def close(ax: float, ay: float, bx: float, by: float) -> bool:
            return math.hypot(ax - bx, ay - by) <= epsilon

        ax, ay, bx, by = self.endpoints_xy()
        cx, cy, dx, dy = other.endpoints_xy()
        if close(ax, ay, cx, cy) and close(bx, by, dx, dy):
            return True
        return close(ax, ay, dx, dy) and close(bx, by, cx, cy)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        name = getattr(self._frame, "name", None)
        return (
            f"FrameLineSegment2D(({self._ax:.6g}, {self._ay:.6g}) -> "
            f"({self._bx:.6g}, {self._by:.6g})) - {name}"
        )


__all__ = ["FrameLineSegment2D"]
