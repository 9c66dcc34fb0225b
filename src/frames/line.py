"""
どこで: `frames.line`
何を: フレーム付きの無限直線 `FrameLine2D`（通過点 + 単位方向）。
なぜ: ポリゴンとの交差・最近頂点の問い合わせや、点の左右判定をフレーム検査付きで行うため。

`FrameLine2D` は半直線（ray）としても使う: その場合は通過点を起点、方向を前方とみなす。
"""

from __future__ import annotations

import math
from typing import Any, Optional

from common.types import Vec2
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


def _normalized(dx: float, dy: float) -> Vec2:
    n = math.hypot(dx, dy)
    if n < line_ops.ONE_TRILLIONTH or math.isnan(n):
        raise ValueError("line direction must be non-zero")
    return dx / n, dy / n


class FrameLine2D(MovableFrameHolder):
    """フレーム付きの直線。

    Parameters
    ----------
    frame : ReferenceFrame | None
        直線を表現するフレーム。
    point : point-like, default (0, 0)
        通過点。
    direction : vector-like, default (1, 0)
        方向（正規化して保持する。長さ 0 は ValueError）。

    Notes
    -----
    `point` / `direction` にフレーム付き値を渡した場合は `frame` と厳格検査する。
    """

    __slots__ = ("_frame", "_px", "_py", "_dx", "_dy")

    def __init__(
        self,
        frame: Optional[ReferenceFrame] = None,
        point: Any = (0.0, 0.0),
        direction: Any = (1.0, 0.0),
    ) -> None:
        self._frame = frame
        check_frame_match(frame, point, direction)
        self._px, self._py = read_xy(point)
        self._dx, self._dy = _normalized(*read_xy(direction))

    @classmethod
    def from_two_points(cls, first: FramePoint2D, second: FramePoint2D) -> "FrameLine2D":
        """厳格: 2 点を通る直線（`first` → `second` 向き）。"""
        line = cls(first.frame)
        line.set_from_two_points(first, second)
        return line

    # ── 読み取り ───────────────────────────────────
    @property
    def point(self) -> FramePoint2D:
        return FramePoint2D(self._frame, self._px, self._py)

    @property
    def direction(self) -> FrameVector2D:
        return FrameVector2D(self._frame, self._dx, self._dy)

    def point_xy(self) -> Vec2:
        return self._px, self._py

    def direction_xy(self) -> Vec2:
        return self._dx, self._dy

    # ── 設定 ───────────────────────────────────────
    def set(self, point: Any, direction: Any) -> None:
        check_frame_match(self._frame, point, direction)
        px, py = read_xy(point)
        self._dx, self._dy = _normalized(*read_xy(direction))
        self._px, self._py = px, py

    def set_from_two_points(self, first: Any, second: Any) -> None:
        check_frame_match(self._frame, first, second)
        ax, ay = read_xy(first)
        bx, by = read_xy(second)
        self._dx, self._dy = _normalized(bx - ax, by - ay)
        self._px, self._py = ax, ay

    def set_matching_frame(self, other: "FrameLine2D") -> None:
        transform = transform_between(other._frame, self._frame)
        self._px, self._py, self._dx, self._dy = other._px, other._py, other._dx, other._dy
        if transform is not None:
            self.apply_transform(transform)

    def set_including_frame(self, other: "FrameLine2D") -> None:
        self._frame = other._frame
        self._px, self._py, self._dx, self._dy = other._px, other._py, other._dx, other._dy

    def negate_direction(self) -> None:
        self._dx = -self._dx
        self._dy = -self._dy

    # ── 点との問い合わせ ───────────────────────────
    def distance(self, point: Any) -> float:
        check_frame_match(self._frame, point)
        x, y = read_xy(point)
        return line_ops.distance_point_to_line(x, y, self._px, self._py, self._dx, self._dy)

    def is_point_on_left_side(self, point: Any) -> bool:
        check_frame_match(self._frame, point)
        x, y = read_xy(point)
        return line_ops.is_point_on_left_side_of_line(
            x, y, self._px, self._py, self._dx, self._dy
        )

    def is_point_on_right_side(self, point: Any) -> bool:
        check_frame_match(self._frame, point)
        x, y = read_xy(point)
        return line_ops.is_point_on_right_side_of_line(
            x, y, self._px, self._py, self._dx, self._dy
        )

    def is_point_on_line(self, point: Any, epsilon: float = 1e-8) -> bool:
        return self.distance(point) <= epsilon

    def orthogonal_projection(self, point: Any, out: Any = None) -> bool:
        """点を直線へ射影する。`out` 省略時は `point` をその場で書き換える。

        方向は正規化済みなので常に成功し True を返す。
        """
        target = point if out is None else out
        check_frame_match(self._frame, point)
        assign_output_frame(self._frame, target)
        x, y = read_xy(point)
        ok, qx, qy = line_ops.orthogonal_projection_on_line(
            x, y, self._px, self._py, self._dx, self._dy
        )
        if not ok:
            return False
        write_xy(target, qx, qy)
        return True

    def orthogonal_projection_copy(self, point: Any) -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        if not self.orthogonal_projection(point, out):
            return None
        return out

    def point_on_line_given_parameter(self, t: float, out: Any = None) -> FramePoint2D:
        """`point + t * direction` を返す（`out` 指定時はそこへ書き込む）。"""
        target = out if out is not None else FramePoint2D(self._frame)
        assign_output_frame(self._frame, target)
        write_xy(target, self._px + t * self._dx, self._py + t * self._dy)
        return target

    # ── 直線との問い合わせ ─────────────────────────
    def intersection_with(self, other: "FrameLine2D", out: Any) -> bool:
        """厳格: 2 直線の交点を `out` へ書き込む。平行なら False（`out` は変更しない）。"""
        check_frame_match(self._frame, other)
        assign_output_frame(self._frame, out)
        ok, x, y = line_ops.intersection_between_two_lines(
            self._px, self._py, self._dx, self._dy, other._px, other._py, other._dx, other._dy
        )
        if not ok:
            return False
        write_xy(out, x, y)
        return True

    def intersection_with_copy(self, other: "FrameLine2D") -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        if not self.intersection_with(other, out):
            return None
        return out

    def perpendicular_line_through_point(self, point: Any) -> "FrameLine2D":
        """厳格: `point` を通り、この直線に垂直（左回り 90 度）な直線を新たに返す。"""
        check_frame_match(self._frame, point)
        return FrameLine2D(self._frame, read_xy(point), (-self._dy, self._dx))

    def is_collinear(self, other: "FrameLine2D", epsilon: float = 1e-8) -> bool:
        """厳格: 2 直線が（向きを問わず）同一直線か。"""
        check_frame_match(self._frame, other)
        if not line_ops.are_vectors_parallel(self._dx, self._dy, other._dx, other._dy, epsilon):
            return False
        return (
            line_ops.distance_point_to_line(
                other._px, other._py, self._px, self._py, self._dx, self._dy
            )
            <= epsilon
        )

    # ── フレーム変換 ───────────────────────────────
    def apply_transform(self, transform: RigidTransform2D) -> None:
        self._px, self._py = transform.transform_point(self._px, self._py)
        self._dx, self._dy = transform.transform_vector(self._dx, self._dy)

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        self._px, self._py = transform.inverse_transform_point(self._px, self._py)
        self._dx, self._dy = transform.inverse_transform_vector(self._dx, self._dy)

    def change_frame(self, desired: ReferenceFrame) -> None:
        transform = transform_between(self._frame, desired)
        if transform is not None:
            self.apply_transform(transform)
        self._frame = desired

    # ── 比較 ───────────────────────────────────────
    def equals(self, other: Any) -> bool:
        return (
            isinstance(other, FrameLine2D)
            and other._frame is self._frame
            and (self._px, self._py, self._dx, self._dy)
            == (other._px, other._py, other._dx, other._dy)
        )

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def epsilon_equals(self, other: Any, epsilon: float) -> bool:
        if not isinstance(other, FrameLine2D) or other._frame is not self._frame:
            return False
        a = (self._px, self._py, self._dx, self._dy)
        b = (other._px, other._py, other._dx, other._dy)
        return all(abs(u - v) <= epsilon for u, v in zip(a, b))

    def geometrically_equals(self, other: "FrameLine2D", epsilon: float) -> bool:
        """厳格: 同一直線を表すか（通過点の位置・方向の向きは問わない）。"""
        return self.is_collinear(other, epsilon)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        name = getattr(self._frame, "name", None)
        return (
            f"FrameLine2D(point=({self._px:.6g}, {self._py:.6g}), "
            f"direction=({self._dx:.6g}, {self._dy:.6g})) - {name}"
        )


__all__ = ["FrameLine2D"]
