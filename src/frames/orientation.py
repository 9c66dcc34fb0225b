"""
どこで: `frames.orientation`
何を: フレーム付き 2D 姿勢（yaw 角）`FrameOrientation2D`。
なぜ: 角度の加減算・補間・ベクトル回転も他のフレーム付き値と同じ厳格検査の規約で扱うため。

角度は常に `(-pi, pi]` に正規化して保持する。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from .protocol import MovableFrameHolder, check_frame_match, transform_between
from .reference_frame import ReferenceFrame
from .transform import RigidTransform2D
from .tuples import FrameTuple2D

logger = logging.getLogger(__name__)


def shift_angle_to_pi_range(angle: float) -> float:
    """角度を `(-pi, pi]` に正規化する。"""
    a = math.fmod(angle, 2.0 * math.pi)
    if a <= -math.pi:
        a += 2.0 * math.pi
    elif a > math.pi:
        a -= 2.0 * math.pi
    return a


class FrameOrientation2D(MovableFrameHolder):
    """フレーム付きの yaw 角。"""

    __slots__ = ("_frame", "_yaw")

    def __init__(self, frame: Optional[ReferenceFrame] = None, yaw: float = 0.0) -> None:
        self._frame = frame
        self._yaw = shift_angle_to_pi_range(float(yaw))

    @property
    def yaw(self) -> float:
        return self._yaw

    @yaw.setter
    def yaw(self, value: float) -> None:
        self._yaw = shift_angle_to_pi_range(float(value))

    def set_to_zero(self) -> None:
        self._yaw = 0.0

    def set_to_nan(self) -> None:
        self._yaw = math.nan

    def contains_nan(self) -> bool:
        return math.isnan(self._yaw)

    # ── 厳格な演算 ─────────────────────────────────
    def set(self, other: "FrameOrientation2D") -> None:
        check_frame_match(self._frame, other)
        self._yaw = other._yaw

    def add(self, other: "FrameOrientation2D") -> None:
        check_frame_match(self._frame, other)
        self.yaw = self._yaw + other._yaw

    def sub(self, other: "FrameOrientation2D") -> None:
        check_frame_match(self._frame, other)
        self.yaw = self._yaw - other._yaw

    def difference(self, other: "FrameOrientation2D") -> float:
        """`self - other` を `(-pi, pi]` で返す。"""
        check_frame_match(self._frame, other)
        return shift_angle_to_pi_range(self._yaw - other._yaw)

    def distance(self, other: "FrameOrientation2D") -> float:
        return abs(self.difference(other))

    def interpolate(
        self, a: "FrameOrientation2D", b: "FrameOrientation2D", alpha: float
    ) -> None:
        """最短弧に沿って `a` から `b` へ `alpha` だけ補間する。"""
        check_frame_match(self._frame, a, b)
        delta = shift_angle_to_pi_range(b._yaw - a._yaw)
        self.yaw = a._yaw + alpha * delta

    def transform(self, value: FrameTuple2D) -> None:
        """フレーム付きの点/ベクトルをこの角度だけ回転する（その場）。"""
        check_frame_match(self._frame, value)
        self._rotate(value, self._yaw)

    def inverse_transform(self, value: FrameTuple2D) -> None:
        check_frame_match(self._frame, value)
        self._rotate(value, -self._yaw)

    @staticmethod
    def _rotate(value: FrameTuple2D, angle: float) -> None:
        c = math.cos(angle)
        s = math.sin(angle)
        x, y = value.xy()
        value.set_xy(c * x - s * y, s * x + c * y)

    # ── フレーム変換 ───────────────────────────────
    def apply_transform(self, transform: RigidTransform2D) -> None:
        self.yaw = self._yaw + transform.yaw

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        self.yaw = self._yaw - transform.yaw

    def set_matching_frame(self, other: "FrameOrientation2D") -> None:
        transform = transform_between(other._frame, self._frame)
        self._yaw = other._yaw
        if transform is not None:
            logger.debug(
                "matching frame: %s -> %s",
                getattr(other._frame, "name", None),
                getattr(self._frame, "name", None),
            )
            self.apply_transform(transform)

    def set_including_frame(self, frame: Optional[ReferenceFrame], yaw: float) -> None:
        self._frame = frame
        self.yaw = yaw

    def change_frame(self, desired: ReferenceFrame) -> None:
        transform = transform_between(self._frame, desired)
        if transform is not None:
            self.apply_transform(transform)
        self._frame = desired

    # ── 比較 ───────────────────────────────────────
    def equals(self, other: Any) -> bool:
        return (
            isinstance(other, FrameOrientation2D)
            and other._frame is self._frame
            and other._yaw == self._yaw
        )

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def epsilon_equals(self, other: Any, epsilon: float) -> bool:
        if not isinstance(other, FrameOrientation2D) or other._frame is not self._frame:
            return False
        return abs(self._yaw - other._yaw) <= epsilon

    def geometrically_equals(self, other: "FrameOrientation2D", epsilon: float) -> bool:
        """厳格: 角度差（周期を考慮）が `epsilon` 以下。"""
        return self.distance(other) <= epsilon

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        name = getattr(self._frame, "name", None)
        return f"FrameOrientation2D(yaw={self._yaw:.6g}) - {name}"


__all__ = ["FrameOrientation2D", "shift_angle_to_pi_range"]
