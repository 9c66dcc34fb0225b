"""
どこで: `geometry.line_ops`
何を: 点・直線・半直線（ray）・線分の基本演算（距離、射影、交差、左右判定）を float 引数で提供。
なぜ: フレーム付き値（`frames`）とポリゴンカーネル（`geometry.polygon_ops`）が共通に使う
      最下層の数値処理を 1 箇所に集め、Numba から相互に呼べる形に保つため。

規約:
- 直線は「通過点 (sx, sy) + 方向 (dx, dy)」、線分は「始点 (ax, ay) → 終点 (bx, by)」で受け取る。
- 左右は方向ベクトルに対する向きで、`cross(d, p - s) > 0` を左とする。
- 失敗し得る関数は `(ok, x, y)` のタプルを返す（ok=False のとき x, y は NaN）。
"""

from __future__ import annotations

import math

import numpy as np

from ._numba import kernel

NAN = np.nan
ONE_TRILLIONTH = 1e-12
ONE_TEN_MILLIONTH = 1e-7


@kernel
def cross(ax: float, ay: float, bx: float, by: float) -> float:
    """2D 外積 `a × b`（z 成分）。"""
    return ax * by - ay * bx


@kernel
def side_value(px: float, py: float, sx: float, sy: float, dx: float, dy: float) -> float:
    """点が直線の左（正）/右（負）/線上（0）のどこにあるかを表す符号付き値。"""
    return dx * (py - sy) - (px - sx) * dy


@kernel
def is_point_on_left_side_of_line(
    px: float, py: float, sx: float, sy: float, dx: float, dy: float
) -> bool:
    return side_value(px, py, sx, sy, dx, dy) > 0.0


@kernel
def is_point_on_right_side_of_line(
    px: float, py: float, sx: float, sy: float, dx: float, dy: float
) -> bool:
    return side_value(px, py, sx, sy, dx, dy) < 0.0


@kernel
def distance_squared(ax: float, ay: float, bx: float, by: float) -> float:
    ex = bx - ax
    ey = by - ay
    return ex * ex + ey * ey


@kernel
def distance(ax: float, ay: float, bx: float, by: float) -> float:
    return math.sqrt(distance_squared(ax, ay, bx, by))


@kernel
def percentage_along_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    """線分 a→b 上への射影位置を割合で返す（0 で a、1 で b、範囲外も可）。

    長さ 0 の線分では 0.0 を返す。
    """
    ex = bx - ax
    ey = by - ay
    length_sq = ex * ex + ey * ey
    if length_sq < ONE_TRILLIONTH * ONE_TRILLIONTH:
        return 0.0
    return ((px - ax) * ex + (py - ay) * ey) / length_sq


@kernel
def orthogonal_projection_on_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> tuple[float, float]:
    """点を線分 a→b に射影した最近点を返す（長さ 0 の線分では a）。"""
    t = percentage_along_segment(px, py, ax, ay, bx, by)
    if t <= 0.0:
        return ax, ay
    if t >= 1.0:
        return bx, by
    return ax + t * (bx - ax), ay + t * (by - ay)


@kernel
def distance_squared_point_to_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    qx, qy = orthogonal_projection_on_segment(px, py, ax, ay, bx, by)
    return distance_squared(px, py, qx, qy)


@kernel
def distance_point_to_segment(
    px: float, py: float, ax: float, ay: float, bx: float, by: float
) -> float:
    return math.sqrt(distance_squared_point_to_segment(px, py, ax, ay, bx, by))


@kernel
def signed_distance_point_to_line(
    px: float, py: float, sx: float, sy: float, dx: float, dy: float
) -> float:
    """直線までの符号付き距離（左が正）。方向が 0 の場合は通過点までの距離。"""
    norm = math.sqrt(dx * dx + dy * dy)
    if norm < ONE_TRILLIONTH:
        return distance(px, py, sx, sy)
    return side_value(px, py, sx, sy, dx, dy) / norm


@kernel
def distance_point_to_line(
    px: float, py: float, sx: float, sy: float, dx: float, dy: float
) -> float:
    return abs(signed_distance_point_to_line(px, py, sx, sy, dx, dy))


@kernel
def orthogonal_projection_on_line(
    px: float, py: float, sx: float, sy: float, dx: float, dy: float
) -> tuple[bool, float, float]:
    """点を直線へ直交射影する。方向が 0 の直線では失敗 `(False, nan, nan)`。"""
    norm_sq = dx * dx + dy * dy
    if norm_sq < ONE_TRILLIONTH * ONE_TRILLIONTH:
        return False, NAN, NAN
    t = ((px - sx) * dx + (py - sy) * dy) / norm_sq
    return True, sx + t * dx, sy + t * dy


@kernel
def is_point_in_front_of_ray(
    px: float, py: float, ox: float, oy: float, dx: float, dy: float
) -> bool:
    """点が半直線の起点より前方（起点を含む）にあるか。"""
    return (px - ox) * dx + (py - oy) * dy >= 0.0


@kernel
def distance_point_to_ray(
    px: float, py: float, ox: float, oy: float, dx: float, dy: float
) -> float:
    if is_point_in_front_of_ray(px, py, ox, oy, dx, dy):
        return distance_point_to_line(px, py, ox, oy, dx, dy)
    return distance(px, py, ox, oy)


@kernel
def are_vectors_parallel(
    ax: float, ay: float, bx: float, by: float, angle_epsilon: float
) -> bool:
    """2 ベクトルが（向きを問わず）`angle_epsilon` 以内で平行か。長さ 0 を含む場合は False。"""
    na = math.sqrt(ax * ax + ay * ay)
    nb = math.sqrt(bx * bx + by * by)
    if na < ONE_TEN_MILLIONTH or nb < ONE_TEN_MILLIONTH:
        return False
    return abs(ax * bx + ay * by) / (na * nb) >= math.cos(angle_epsilon)


@kernel
def intersection_between_two_lines(
    s1x: float,
    s1y: float,
    d1x: float,
    d1y: float,
    s2x: float,
    s2y: float,
    d2x: float,
    d2y: float,
) -> tuple[bool, float, float]:
    """2 直線の交点。平行（一致を含む）では `(False, nan, nan)`。"""
    denom = cross(d1x, d1y, d2x, d2y)
    scale = math.sqrt((d1x * d1x + d1y * d1y) * (d2x * d2x + d2y * d2y))
    if abs(denom) <= ONE_TRILLIONTH * scale or scale == 0.0:
        return False, NAN, NAN
    t = cross(s2x - s1x, s2y - s1y, d2x, d2y) / denom
    return True, s1x + t * d1x, s1y + t * d1y


@kernel
def intersection_between_two_segments(
    ax: float,
    ay: float,
    bx: float,
    by: float,
    cx: float,
    cy: float,
    ex: float,
    ey: float,
) -> tuple[bool, float, float]:
    """線分 a→b と c→e の交点。

    同一直線上で重なる場合は、重なり区間に含まれる端点のうち最初に見つかったもの
    （c, e, a, b の順）を返す。交わらなければ `(False, nan, nan)`。
    """
    d1x = bx - ax
    d1y = by - ay
    d2x = ex - cx
    d2y = ey - cy
    denom = cross(d1x, d1y, d2x, d2y)
    scale = math.sqrt((d1x * d1x + d1y * d1y) * (d2x * d2x + d2y * d2y))
    if abs(denom) <= ONE_TRILLIONTH * scale or scale == 0.0:
        # 平行または縮退: 端点が相手の線分上にあるかで判定
        if distance_point_to_segment(cx, cy, ax, ay, bx, by) <= ONE_TRILLIONTH:
            return True, cx, cy
        if distance_point_to_segment(ex, ey, ax, ay, bx, by) <= ONE_TRILLIONTH:
            return True, ex, ey
        if distance_point_to_segment(ax, ay, cx, cy, ex, ey) <= ONE_TRILLIONTH:
            return True, ax, ay
        if distance_point_to_segment(bx, by, cx, cy, ex, ey) <= ONE_TRILLIONTH:
            return True, bx, by
        return False, NAN, NAN
    t = cross(cx - ax, cy - ay, d2x, d2y) / denom
    u = cross(cx - ax, cy - ay, d1x, d1y) / denom
    if t < -ONE_TRILLIONTH or t > 1.0 + ONE_TRILLIONTH:
        return False, NAN, NAN
    if u < -ONE_TRILLIONTH or u > 1.0 + ONE_TRILLIONTH:
        return False, NAN, NAN
    return True, ax + t * d1x, ay + t * d1y


__all__ = [
    "cross",
    "side_value",
    "is_point_on_left_side_of_line",
    "is_point_on_right_side_of_line",
    "distance_squared",
    "distance",
    "percentage_along_segment",
    "orthogonal_projection_on_segment",
    "distance_squared_point_to_segment",
    "distance_point_to_segment",
    "signed_distance_point_to_line",
    "distance_point_to_line",
    "orthogonal_projection_on_line",
    "is_point_in_front_of_ray",
    "distance_point_to_ray",
    "are_vectors_parallel",
    "intersection_between_two_lines",
    "intersection_between_two_segments",
]
