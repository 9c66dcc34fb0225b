"""
どこで: `frames.transform`
何を: 2D 剛体変換（回転 yaw + 並進）を 3x3 同次行列で表す `RigidTransform2D`。
なぜ: フレーム間の座標変換を 1 つの型で扱い、点（並進あり）とベクトル（並進なし）を
      取り違えずに適用できるようにするため。
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np


class RigidTransform2D:
    """2D 剛体変換（反射なし）。

    `transform_point(p)` は `R(yaw) @ p + t` を返す。合成 `a @ b` は「b を先に適用し、次に a」。

    Parameters
    ----------
    yaw : float, default 0.0
        回転角 [rad]（反時計回りが正）。
    translation : Iterable[float], default (0, 0)
        並進ベクトル。
    """

    __slots__ = ("matrix",)

    def __init__(self, yaw: float = 0.0, translation: Iterable[float] = (0.0, 0.0)) -> None:
        tx, ty = (float(v) for v in translation)
        c = math.cos(yaw)
        s = math.sin(yaw)
        self.matrix = np.array(
            [[c, -s, tx], [s, c, ty], [0.0, 0.0, 1.0]],
            dtype=np.float64,
        )

    # ── 生成 ───────────────────────────────────────
    @classmethod
    def identity(cls) -> "RigidTransform2D":
        return cls()

    @classmethod
    def from_matrix(cls, matrix: np.ndarray, *, epsilon: float = 1e-9) -> "RigidTransform2D":
        """3x3 同次行列から生成する。剛体（直交・det=+1）でなければ ValueError。"""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"matrix must have shape (3, 3), got {m.shape}")
        r = m[:2, :2]
        if not np.allclose(r @ r.T, np.eye(2), atol=epsilon):
            raise ValueError("rotation part is not orthonormal")
        if np.linalg.det(r) < 0.0:
            raise ValueError("reflections are not rigid transforms")
        if not np.allclose(m[2], (0.0, 0.0, 1.0), atol=epsilon):
            raise ValueError("last row must be (0, 0, 1)")
        out = cls.__new__(cls)
        out.matrix = m.copy()
        return out

    # ── 属性 ───────────────────────────────────────
    @property
    def yaw(self) -> float:
        return math.atan2(self.matrix[1, 0], self.matrix[0, 0])

    @property
    def translation(self) -> tuple[float, float]:
        return float(self.matrix[0, 2]), float(self.matrix[1, 2])

    def has_rotation(self, epsilon: float = 0.0) -> bool:
        return abs(self.yaw) > epsilon

    def has_translation(self, epsilon: float = 0.0) -> bool:
        tx, ty = self.translation
        return abs(tx) > epsilon or abs(ty) > epsilon

    def is_identity(self, epsilon: float = 1e-12) -> bool:
        return bool(np.allclose(self.matrix, np.eye(3), rtol=0.0, atol=epsilon))

    # ── 合成/逆 ────────────────────────────────────
    def inverse(self) -> "RigidTransform2D":
        r = self.matrix[:2, :2]
        t = self.matrix[:2, 2]
        out = RigidTransform2D.__new__(RigidTransform2D)
        m = np.eye(3, dtype=np.float64)
        m[:2, :2] = r.T
        m[:2, 2] = -(r.T @ t)
        out.matrix = m
        return out

    def copy(self) -> "RigidTransform2D":
        out = RigidTransform2D.__new__(RigidTransform2D)
        out.matrix = self.matrix.copy()
        return out

    def multiply(self, other: "RigidTransform2D") -> "RigidTransform2D":
        """`self @ other`（other を先に適用）を新しい変換として返す。"""
        out = RigidTransform2D.__new__(RigidTransform2D)
        out.matrix = self.matrix @ other.matrix
        return out

    def __matmul__(self, other: "RigidTransform2D") -> "RigidTransform2D":
        return self.multiply(other)

    # ── 適用 ───────────────────────────────────────
    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        m = self.matrix
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    def inverse_transform_point(self, x: float, y: float) -> tuple[float, float]:
        m = self.matrix
        dx = x - m[0, 2]
        dy = y - m[1, 2]
        return float(m[0, 0] * dx + m[1, 0] * dy), float(m[0, 1] * dx + m[1, 1] * dy)

    def transform_vector(self, x: float, y: float) -> tuple[float, float]:
        m = self.matrix
        return float(m[0, 0] * x + m[0, 1] * y), float(m[1, 0] * x + m[1, 1] * y)

    def inverse_transform_vector(self, x: float, y: float) -> tuple[float, float]:
        m = self.matrix
        return float(m[0, 0] * x + m[1, 0] * y), float(m[0, 1] * x + m[1, 1] * y)

    def transform_points(self, points: np.ndarray, out: np.ndarray | None = None) -> np.ndarray:
        """`(N, 2)` 配列の各点を変換する（`out` 指定時は書き込み先として使う）。"""
        pts = np.asarray(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError(f"points must have shape (N, 2), got {pts.shape}")
        r = self.matrix[:2, :2]
        t = self.matrix[:2, 2]
        res = pts @ r.T + t
        if out is None:
            return res
        out[...] = res
        return out

    def inverse_transform_points(
        self, points: np.ndarray, out: np.ndarray | None = None
    ) -> np.ndarray:
        return self.inverse().transform_points(points, out)

    # ── 比較/表示 ──────────────────────────────────
    def epsilon_equals(self, other: "RigidTransform2D", epsilon: float) -> bool:
        return bool(np.allclose(self.matrix, other.matrix, rtol=0.0, atol=epsilon))

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        tx, ty = self.translation
        return f"RigidTransform2D(yaw={self.yaw:.6g}, translation=({tx:.6g}, {ty:.6g}))"


__all__ = ["RigidTransform2D"]
