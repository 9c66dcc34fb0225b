"""
どこで: `geometry.polygon_ops`
何を: 頂点バッファ `vertices (capacity, 2) float64` の先頭 `n` 行を凸多角形とみなすアルゴリズム群。
      凸包（in-place）、面積/重心、符号付き距離、最近頂点/最近辺、視線（line-of-sight）、
      直線/半直線/線分との交差、直交射影、半直線との最近点を提供する。
なぜ: `polygon.FrameConvexPolygon2D` の問い合わせをフレーム非依存・割り当て無しで実装し、
      Numba でまとめて JIT 化するため。

前提:
- `inplace_convex_hull` 以外の関数は、頂点が時計回り（clockwise）で冗長点を含まないことを仮定する。
- 時計回りなので、各辺 i（頂点 i → 頂点 i+1）の「外側」は辺ベクトルの左側になる。
- 辺 i は頂点 i と頂点 `(i + 1) % n` を結ぶ。n == 2 のとき辺 0 と辺 1 は向きが逆の同一線分。
- 失敗・該当無しは -1 / False / NaN で返し、例外は送出しない。
"""

from __future__ import annotations

import numpy as np

from . import line_ops as lo
from ._numba import kernel

NAN = np.nan
INF = np.inf


@kernel
def _next(i: int, n: int) -> int:
    return i + 1 if i + 1 < n else 0


@kernel
def inplace_convex_hull(vertices: np.ndarray, n: int, epsilon: float) -> int:
    """先頭 `n` 行の点群を凸包で置き換え、新しい頂点数を返す。

    手順:
    1) 各成分の差が `epsilon` 以下の点を重複とみなし、入力順で最初の出現だけを残す。
    2) (x, y) の辞書式順に並べ、Andrew の monotone chain で反時計回りの凸包を作る。
       `cross <= 0` で除去するため、辺上に厳密に乗る点は捨てられ端点（極点）が残る。
    3) 時計回りに反転し、x 最小（同値なら y 最大）の頂点を先頭へ回転する。

    0/1/2 点（縮退）はそのまま 0/1/2 頂点として返す。
    """
    if n <= 0:
        return 0

    # 1) 重複除去（前詰め。書き込み先は常に読み込み位置以下）
    m = 0
    for i in range(n):
        xi = vertices[i, 0]
        yi = vertices[i, 1]
        duplicate = False
        for j in range(m):
            if abs(vertices[j, 0] - xi) <= epsilon and abs(vertices[j, 1] - yi) <= epsilon:
                duplicate = True
                break
        if not duplicate:
            vertices[m, 0] = xi
            vertices[m, 1] = yi
            m += 1

    if m == 1:
        return 1

    # 2) 辞書式ソート（挿入ソート: 頂点数は小さい想定）
    order = np.arange(m)
    for i in range(1, m):
        k = order[i]
        kx = vertices[k, 0]
        ky = vertices[k, 1]
        j = i - 1
        while j >= 0 and (
            vertices[order[j], 0] > kx
            or (vertices[order[j], 0] == kx and vertices[order[j], 1] > ky)
        ):
            order[j + 1] = order[j]
            j -= 1
        order[j + 1] = k

    hull = np.empty(2 * m + 1, dtype=np.int64)
    h = 0
    for i in range(m):
        k = order[i]
        while h >= 2 and _turn(vertices, hull[h - 2], hull[h - 1], k) <= 0.0:
            h -= 1
        hull[h] = k
        h += 1
    lower = h + 1
    for i in range(m - 2, -1, -1):
        k = order[i]
        while h >= lower and _turn(vertices, hull[h - 2], hull[h - 1], k) <= 0.0:
            h -= 1
        hull[h] = k
        h += 1
    h -= 1  # 末尾は先頭と同じ点

    # 3) 時計回りへ反転し、x 最小・y 最大の頂点から始める
    cw = np.empty(h, dtype=np.int64)
    for k in range(h):
        cw[k] = hull[(h - k) % h]
    start = 0
    for k in range(1, h):
        x = vertices[cw[k], 0]
        y = vertices[cw[k], 1]
        sx = vertices[cw[start], 0]
        sy = vertices[cw[start], 1]
        if x < sx or (x == sx and y > sy):
            start = k

    ordered = np.empty((h, 2), dtype=np.float64)
    for k in range(h):
        idx = cw[(start + k) % h]
        ordered[k, 0] = vertices[idx, 0]
        ordered[k, 1] = vertices[idx, 1]
    for k in range(h):
        vertices[k, 0] = ordered[k, 0]
        vertices[k, 1] = ordered[k, 1]
    return h


@kernel
def _turn(vertices: np.ndarray, o: int, a: int, b: int) -> float:
    return lo.cross(
        vertices[a, 0] - vertices[o, 0],
        vertices[a, 1] - vertices[o, 1],
        vertices[b, 0] - vertices[o, 0],
        vertices[b, 1] - vertices[o, 1],
    )


@kernel
def area_and_centroid(vertices: np.ndarray, n: int) -> tuple[float, float, float]:
    """面積（非負）と面積加重重心 `(area, cx, cy)` を返す。

    - n == 0: すべて NaN
    - n < 3 または面積がほぼ 0: 面積 0 と頂点平均
    """
    if n == 0:
        return NAN, NAN, NAN
    sx = 0.0
    sy = 0.0
    for i in range(n):
        sx += vertices[i, 0]
        sy += vertices[i, 1]
    if n < 3:
        return 0.0, sx / n, sy / n

    signed = 0.0
    cx = 0.0
    cy = 0.0
    for i in range(n):
        j = _next(i, n)
        w = vertices[i, 0] * vertices[j, 1] - vertices[j, 0] * vertices[i, 1]
        signed += w
        cx += (vertices[i, 0] + vertices[j, 0]) * w
        cy += (vertices[i, 1] + vertices[j, 1]) * w
    signed *= 0.5
    if abs(signed) < 1e-12:
        return 0.0, sx / n, sy / n
    f = 1.0 / (6.0 * signed)
    return abs(signed), cx * f, cy * f


@kernel
def signed_distance(px: float, py: float, vertices: np.ndarray, n: int) -> float:
    """符号付き距離（内側で負、外側で正、境界で 0）。頂点 0 個なら NaN。"""
    if n == 0:
        return NAN
    if n == 1:
        return lo.distance(px, py, vertices[0, 0], vertices[0, 1])
    if n == 2:
        return lo.distance_point_to_segment(
            px, py, vertices[0, 0], vertices[0, 1], vertices[1, 0], vertices[1, 1]
        )

    inside = True
    min_d = INF
    for i in range(n):
        j = _next(i, n)
        ax = vertices[i, 0]
        ay = vertices[i, 1]
        bx = vertices[j, 0]
        by = vertices[j, 1]
        if lo.is_point_on_left_side_of_line(px, py, ax, ay, bx - ax, by - ay):
            inside = False
        d = lo.distance_point_to_segment(px, py, ax, ay, bx, by)
        if d < min_d:
            min_d = d
    if inside:
        return -min_d
    return min_d


@kernel
def closest_vertex_index_to_point(px: float, py: float, vertices: np.ndarray, n: int) -> int:
    """二乗距離が最小の頂点 index（同値は小さい index 優先、頂点 0 個なら -1）。"""
    best = -1
    best_d = INF
    for i in range(n):
        d = lo.distance_squared(px, py, vertices[i, 0], vertices[i, 1])
        if d < best_d:
            best_d = d
            best = i
    return best


@kernel
def closest_vertex_index_to_line(
    sx: float, sy: float, dx: float, dy: float, vertices: np.ndarray, n: int
) -> int:
    """直線までの垂直距離が最小の頂点 index（同値は小さい index 優先、頂点 0 個なら -1）。"""
    best = -1
    best_d = INF
    for i in range(n):
        d = lo.distance_point_to_line(vertices[i, 0], vertices[i, 1], sx, sy, dx, dy)
        if d < best_d:
            best_d = d
            best = i
    return best


@kernel
def closest_edge_index_to_point(px: float, py: float, vertices: np.ndarray, n: int) -> int:
    """点に最も近い辺の index。頂点 1 個以下なら -1。

    点がいずれかの辺の外側にあれば、外側判定された辺の中で線分距離が最小のものを返す。
    すべての辺の内側なら、辺を含む直線までの距離が最小のものを返す。
    """
    if n <= 1:
        return -1
    inside_index = -1
    inside_d = INF
    outside_index = -1
    outside_d = INF
    for i in range(n):
        j = _next(i, n)
        ax = vertices[i, 0]
        ay = vertices[i, 1]
        bx = vertices[j, 0]
        by = vertices[j, 1]
        if lo.is_point_on_left_side_of_line(px, py, ax, ay, bx - ax, by - ay):
            d = lo.distance_squared_point_to_segment(px, py, ax, ay, bx, by)
            if d < outside_d:
                outside_d = d
                outside_index = i
        elif outside_index < 0:
            d = lo.distance_point_to_line(px, py, ax, ay, bx - ax, by - ay)
            if d < inside_d:
                inside_d = d
                inside_index = i
    if outside_index >= 0:
        return outside_index
    return inside_index


@kernel
def can_observer_see_edge(
    ox: float, oy: float, vertices: np.ndarray, n: int, edge_index: int
) -> bool:
    """観測者が辺の外側（左側）に厳密にいるとき True。頂点 1 個以下なら False。"""
    if n <= 1:
        return False
    j = _next(edge_index, n)
    ax = vertices[edge_index, 0]
    ay = vertices[edge_index, 1]
    return lo.is_point_on_left_side_of_line(
        ox, oy, ax, ay, vertices[j, 0] - ax, vertices[j, 1] - ay
    )


@kernel
def line_of_sight_start_index(ox: float, oy: float, vertices: np.ndarray, n: int) -> int:
    """外部の観測者から見える頂点範囲の始点（時計回りで最初の可視頂点）。失敗時 -1。"""
    if n == 0:
        return -1
    if n == 1:
        if ox == vertices[0, 0] and oy == vertices[0, 1]:
            return -1
        return 0
    if n == 2:
        if signed_distance(ox, oy, vertices, n) <= 0.0:
            return -1
        if can_observer_see_edge(ox, oy, vertices, n, 0):
            return 0
        return 1

    previous_visible = can_observer_see_edge(ox, oy, vertices, n, n - 1)
    for i in range(n):
        visible = can_observer_see_edge(ox, oy, vertices, n, i)
        if visible and not previous_visible:
            return i
        previous_visible = visible
    return -1


@kernel
def line_of_sight_end_index(ox: float, oy: float, vertices: np.ndarray, n: int) -> int:
    """外部の観測者から見える頂点範囲の終点（時計回りで最後の可視頂点）。失敗時 -1。"""
    if n == 0:
        return -1
    if n == 1:
        if ox == vertices[0, 0] and oy == vertices[0, 1]:
            return -1
        return 0
    if n == 2:
        if signed_distance(ox, oy, vertices, n) <= 0.0:
            return -1
        if can_observer_see_edge(ox, oy, vertices, n, 0):
            return 1
        return 0

    previous_visible = can_observer_see_edge(ox, oy, vertices, n, n - 1)
    for i in range(n):
        visible = can_observer_see_edge(ox, oy, vertices, n, i)
        if previous_visible and not visible:
            return i
        previous_visible = visible
    return -1


@kernel
def orthogonal_projection(
    px: float, py: float, vertices: np.ndarray, n: int
) -> tuple[bool, float, float]:
    """点を多角形の境界へ直交射影する。

    - n == 0: 失敗
    - n == 1: その頂点
    - n == 2: 線分への射影
    - 点が内側（または境界上）: 失敗（呼び出し側は恒等射影として扱う）
    """
    if n == 0:
        return False, NAN, NAN
    if n == 1:
        return True, vertices[0, 0], vertices[0, 1]
    if n == 2:
        x, y = lo.orthogonal_projection_on_segment(
            px, py, vertices[0, 0], vertices[0, 1], vertices[1, 0], vertices[1, 1]
        )
        return True, x, y

    edge = closest_edge_index_to_point(px, py, vertices, n)
    if edge < 0 or not can_observer_see_edge(px, py, vertices, n, edge):
        return False, NAN, NAN
    j = _next(edge, n)
    x, y = lo.orthogonal_projection_on_segment(
        px, py, vertices[edge, 0], vertices[edge, 1], vertices[j, 0], vertices[j, 1]
    )
    return True, x, y


@kernel
def _push_unique(
    count: int,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    x: float,
    y: float,
    epsilon: float,
) -> tuple[int, float, float, float, float]:
    """交点候補を重複除去しつつ最大 2 個まで保持する。"""
    if count == 0:
        return 1, x, y, x2, y2
    if count == 1:
        if abs(x - x1) <= epsilon and abs(y - y1) <= epsilon:
            return count, x1, y1, x2, y2
        return 2, x1, y1, x, y
    return count, x1, y1, x2, y2


@kernel
def intersection_with_line(
    sx: float, sy: float, dx: float, dy: float, vertices: np.ndarray, n: int, epsilon: float
) -> tuple[int, float, float, float, float]:
    """直線との交点 `(count, x1, y1, x2, y2)`（count は 0/1/2、未使用は NaN）。

    頂点が直線上にあればそれ自体を交点とし、辺の両端で符号が反転すれば交差点を補間する。
    辺と同一直線上の場合は、その辺の両端点（境界への入出点）が交点になる。
    """
    count = 0
    x1 = NAN
    y1 = NAN
    x2 = NAN
    y2 = NAN
    if n == 0 or (dx == 0.0 and dy == 0.0):
        return count, x1, y1, x2, y2
    if n == 1:
        if lo.distance_point_to_line(vertices[0, 0], vertices[0, 1], sx, sy, dx, dy) < lo.ONE_TRILLIONTH:
            return 1, vertices[0, 0], vertices[0, 1], x2, y2
        return count, x1, y1, x2, y2

    for i in range(n):
        j = _next(i, n)
        ax = vertices[i, 0]
        ay = vertices[i, 1]
        bx = vertices[j, 0]
        by = vertices[j, 1]
        ca = lo.side_value(ax, ay, sx, sy, dx, dy)
        cb = lo.side_value(bx, by, sx, sy, dx, dy)
        if ca == 0.0:
            count, x1, y1, x2, y2 = _push_unique(count, x1, y1, x2, y2, ax, ay, epsilon)
        elif ca * cb < 0.0:
            t = ca / (ca - cb)
            count, x1, y1, x2, y2 = _push_unique(
                count, x1, y1, x2, y2, ax + t * (bx - ax), ay + t * (by - ay), epsilon
            )
        if count == 2:
            break
    return count, x1, y1, x2, y2


@kernel
def intersection_with_ray(
    ox: float, oy: float, dx: float, dy: float, vertices: np.ndarray, n: int, epsilon: float
) -> tuple[int, float, float, float, float]:
    """半直線との交点。直線の交点のうち起点より前方のものだけを残す。"""
    count, x1, y1, x2, y2 = intersection_with_line(ox, oy, dx, dy, vertices, n, epsilon)
    if count == 2 and not lo.is_point_in_front_of_ray(x2, y2, ox, oy, dx, dy):
        count = 1
        x2 = NAN
        y2 = NAN
    if count >= 1 and not lo.is_point_in_front_of_ray(x1, y1, ox, oy, dx, dy):
        count -= 1
        x1 = x2
        y1 = y2
        x2 = NAN
        y2 = NAN
    return count, x1, y1, x2, y2


@kernel
def intersection_with_segment(
    ax: float,
    ay: float,
    bx: float,
    by: float,
    vertices: np.ndarray,
    n: int,
    epsilon: float,
) -> tuple[int, float, float, float, float]:
    """線分 a→b との交点。

    線分の端点が辺上にある場合も交点に数える（許容 1e-12）。長さ 0 の線分は点として扱う。
    """
    count = 0
    x1 = NAN
    y1 = NAN
    x2 = NAN
    y2 = NAN
    if n == 0:
        return count, x1, y1, x2, y2
    if n == 1:
        vx = vertices[0, 0]
        vy = vertices[0, 1]
        if lo.distance_point_to_segment(vx, vy, ax, ay, bx, by) < lo.ONE_TRILLIONTH:
            return 1, vx, vy, x2, y2
        return count, x1, y1, x2, y2

    dx = bx - ax
    dy = by - ay
    degenerate = dx * dx + dy * dy < lo.ONE_TRILLIONTH * lo.ONE_TRILLIONTH
    for i in range(n):
        j = _next(i, n)
        v0x = vertices[i, 0]
        v0y = vertices[i, 1]
        v1x = vertices[j, 0]
        v1y = vertices[j, 1]
        if lo.distance_point_to_segment(ax, ay, v0x, v0y, v1x, v1y) < lo.ONE_TRILLIONTH:
            count, x1, y1, x2, y2 = _push_unique(count, x1, y1, x2, y2, ax, ay, epsilon)
        if lo.distance_point_to_segment(bx, by, v0x, v0y, v1x, v1y) < lo.ONE_TRILLIONTH:
            count, x1, y1, x2, y2 = _push_unique(count, x1, y1, x2, y2, bx, by, epsilon)
        if count < 2 and not degenerate:
            ca = lo.side_value(v0x, v0y, ax, ay, dx, dy)
            cb = lo.side_value(v1x, v1y, ax, ay, dx, dy)
            hit = False
            qx = NAN
            qy = NAN
            if ca == 0.0:
                hit = True
                qx = v0x
                qy = v0y
            elif ca * cb < 0.0:
                t = ca / (ca - cb)
                hit = True
                qx = v0x + t * (v1x - v0x)
                qy = v0y + t * (v1y - v0y)
            if hit:
                u = lo.percentage_along_segment(qx, qy, ax, ay, bx, by)
                if u >= 0.0 and u <= 1.0:
                    count, x1, y1, x2, y2 = _push_unique(count, x1, y1, x2, y2, qx, qy, epsilon)
        if count == 2:
            break
    return count, x1, y1, x2, y2


@kernel
def closest_point_with_ray(
    ox: float, oy: float, dx: float, dy: float, vertices: np.ndarray, n: int, epsilon: float
) -> tuple[bool, float, float]:
    """交差しない半直線に最も近い多角形上の点。半直線が多角形に当たる場合は失敗。

    非交差の線分と半直線の最短距離は、線分端点→半直線、または半直線起点→線分のいずれかで
    達成されるため、各頂点と各辺への起点射影を候補として最小を取る。
    """
    if n == 0:
        return False, NAN, NAN
    count, _x1, _y1, _x2, _y2 = intersection_with_ray(ox, oy, dx, dy, vertices, n, epsilon)
    if count > 0:
        return False, NAN, NAN

    best_d = INF
    bx = NAN
    by = NAN
    for i in range(n):
        d = lo.distance_point_to_ray(vertices[i, 0], vertices[i, 1], ox, oy, dx, dy)
        if d < best_d:
            best_d = d
            bx = vertices[i, 0]
            by = vertices[i, 1]
    if n >= 2:
        for i in range(n):
            j = _next(i, n)
            qx, qy = lo.orthogonal_projection_on_segment(
                ox, oy, vertices[i, 0], vertices[i, 1], vertices[j, 0], vertices[j, 1]
            )
            d = lo.distance(ox, oy, qx, qy)
            if d < best_d:
                best_d = d
                bx = qx
                by = qy
    return True, bx, by


@kernel
def bounding_box(vertices: np.ndarray, n: int) -> tuple[float, float, float, float]:
    """`(min_x, min_y, max_x, max_y)`。頂点 0 個ならすべて NaN。"""
    if n == 0:
        return NAN, NAN, NAN, NAN
    min_x = vertices[0, 0]
    min_y = vertices[0, 1]
    max_x = min_x
    max_y = min_y
    for i in range(1, n):
        x = vertices[i, 0]
        y = vertices[i, 1]
        min_x = min(min_x, x)
        min_y = min(min_y, y)
        max_x = max(max_x, x)
        max_y = max(max_y, y)
    return min_x, min_y, max_x, max_y


__all__ = [
    "inplace_convex_hull",
    "area_and_centroid",
    "signed_distance",
    "closest_vertex_index_to_point",
    "closest_vertex_index_to_line",
    "closest_edge_index_to_point",
    "can_observer_see_edge",
    "line_of_sight_start_index",
    "line_of_sight_end_index",
    "orthogonal_projection",
    "intersection_with_line",
    "intersection_with_ray",
    "intersection_with_segment",
    "closest_point_with_ray",
    "bounding_box",
]
