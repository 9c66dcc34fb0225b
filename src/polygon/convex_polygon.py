"""
どこで: `polygon.convex_polygon`
何を: フレーム付き凸多角形 `FrameConvexPolygon2D`。可変の頂点バッファ、`update()` による凸包化と
      時計回り整列、up-to-date ライフサイクル、各種幾何問い合わせを提供する。
なぜ: 支持多角形（足裏）などを毎制御周期で構築・問い合わせする用途で、フレーム整合の検査と
      割り当ての少ない数値計算（`geometry.polygon_ops`）を 1 つの型にまとめるため。

ライフサイクル:
    EMPTY/MUTATING（stale）--update()--> QUERYABLE（up-to-date）--任意の頂点編集--> MUTATING

- 頂点編集（`clear` / `add_vertex*` / `remove_vertex`）は stale にする。重複除去や並べ替えは
  `update()` まで遅延する。
- 問い合わせは stale のとき `StalePolygonError` を送出する。フレーム付きの引数はその前に厳格検査する。
- 頂点 0/1/2 個（空・点・線分）の縮退はすべての問い合わせで例外なく扱う。

呼び出し形式:
- pack 版（`out` を受け取り bool/int を返す）は結果用の割り当てを行わない。
- `*_copy` 版は新しい値を割り当てて返し、「結果なし」は None で表す。
- フレーム無しの入力（長さ 2 のシーケンス、`(point, direction)` / `(first, second)` のタプル、
  `(N, 2)` 配列）は検査せず、既にポリゴンのフレームで表現されているとみなす（信頼境界）。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterator, Optional, Sequence

import numpy as np

from common import settings
from common.errors import EmptyPolygonError, FrameMismatchError, StalePolygonError
from frames.line import FrameLine2D
from frames.line_segment import FrameLineSegment2D
from frames.protocol import (
    FrameHolder,
    MovableFrameHolder,
    assign_output_frame,
    check_frame_match,
    check_output_frame,
    transform_between,
)
from frames.reference_frame import ReferenceFrame
from frames.transform import RigidTransform2D
from frames.tuples import FramePoint2D, read_xy, write_xy
from geometry import polygon_ops

logger = logging.getLogger(__name__)

# 問い合わせ引数として受け付ける直線/線分（フレーム無しはタプルで渡す）
LineLike = Any
SegmentLike = Any


def _line_xy(line: LineLike) -> tuple[float, float, float, float]:
    if isinstance(line, FrameLine2D):
        px, py = line.point_xy()
        dx, dy = line.direction_xy()
        return px, py, dx, dy
    point, direction = line
    px, py = read_xy(point)
    dx, dy = read_xy(direction)
    return px, py, dx, dy


def _segment_xy(segment: SegmentLike) -> tuple[float, float, float, float]:
    if isinstance(segment, FrameLineSegment2D):
        return segment.endpoints_xy()
    first, second = segment
    ax, ay = read_xy(first)
    bx, by = read_xy(second)
    return ax, ay, bx, by


class FrameConvexPolygon2D(MovableFrameHolder):
    """フレーム付きの 2D 凸多角形。

    Parameters
    ----------
    frame : ReferenceFrame | None
        頂点を表現するフレーム。
    vertices : supplier, optional
        指定時は `set(vertices)` を実行し、up-to-date の状態で構築する。
        省略時は空かつ stale。
    capacity : int, optional
        頂点バッファの初期容量（既定は `settings.POLYGON_INITIAL_CAPACITY`）。足りなければ倍々で拡張する。

    Notes
    -----
    up-to-date のとき、頂点は時計回りで、連続する 3 頂点が同一直線上に並ぶことはない。
    先頭は x 最小（同値なら y 最大）の頂点。
    """

    __slots__ = ("_frame", "_buffer", "_n", "_up_to_date", "_area", "_cx", "_cy")

    def __init__(
        self,
        frame: Optional[ReferenceFrame] = None,
        vertices: Any = None,
        *,
        capacity: Optional[int] = None,
    ) -> None:
        cap = capacity if capacity is not None else settings.get().POLYGON_INITIAL_CAPACITY
        self._frame = frame
        self._buffer = np.empty((max(1, int(cap)), 2), dtype=np.float64)
        self._n = 0
        self._up_to_date = False
        self._area = math.nan
        self._cx = math.nan
        self._cy = math.nan
        if vertices is not None:
            self.set(vertices)

    # ── 状態 ───────────────────────────────────────
    @property
    def number_of_vertices(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    @property
    def capacity(self) -> int:
        return int(self._buffer.shape[0])

    @property
    def is_up_to_date(self) -> bool:
        return self._up_to_date

    @property
    def is_empty(self) -> bool:
        return self._n == 0

    def _check_up_to_date(self) -> None:
        if not self._up_to_date:
            raise StalePolygonError()

    def _check_outputs(self, *outs: Any) -> None:
        """固定フレームの出力検査と stale 検査。可動出力の付け替えは全検査の後に呼び出し側で行う。"""
        check_output_frame(self._frame, *outs)
        self._check_up_to_date()

    @property
    def area(self) -> float:
        """面積（頂点 2 個以下は 0、空は NaN）。"""
        self._check_up_to_date()
        return self._area

    @property
    def centroid(self) -> FramePoint2D:
        """面積加重重心のコピー（空なら NaN 座標）。"""
        self._check_up_to_date()
        return FramePoint2D(self._frame, self._cx, self._cy)

    def get_centroid(self, out: Any) -> None:
        self._check_outputs(out)
        assign_output_frame(self._frame, out)
        write_xy(out, self._cx, self._cy)

    def bounding_box(self) -> np.ndarray:
        """`[[min_x, min_y], [max_x, max_y]]`（空なら NaN）。"""
        self._check_up_to_date()
        min_x, min_y, max_x, max_y = polygon_ops.bounding_box(self._buffer, self._n)
        return np.array([[min_x, min_y], [max_x, max_y]], dtype=np.float64)

    def vertices_view(self) -> np.ndarray:
        """頂点 `(N, 2)` の読み取り専用ビュー（コピー無し）。"""
        self._check_up_to_date()
        view = self._buffer[: self._n].view()
        view.setflags(write=False)
        return view

    # ── 頂点アクセス ───────────────────────────────
    def _check_index(self, index: int) -> int:
        if self._n == 0:
            raise EmptyPolygonError("polygon has no vertices")
        i = int(index)
        if i < 0 or i >= self._n:
            raise IndexError(f"vertex index {index} out of range [0, {self._n})")
        return i

    def get_vertex(self, index: int, out: Any) -> None:
        self._check_outputs(out)
        i = self._check_index(index)
        assign_output_frame(self._frame, out)
        write_xy(out, self._buffer[i, 0], self._buffer[i, 1])

    def vertex(self, index: int) -> FramePoint2D:
        """時計回り順で `index` 番目の頂点のコピー。"""
        self._check_up_to_date()
        i = self._check_index(index)
        return FramePoint2D(self._frame, self._buffer[i, 0], self._buffer[i, 1])

    def vertex_ccw(self, index: int) -> FramePoint2D:
        """反時計回り順で `index` 番目の頂点のコピー。"""
        self._check_up_to_date()
        i = self._check_index(index)
        return self.vertex(self._n - 1 - i)

    def next_vertex_index(self, index: int) -> int:
        self._check_up_to_date()
        i = self._check_index(index)
        return i + 1 if i + 1 < self._n else 0

    def previous_vertex_index(self, index: int) -> int:
        self._check_up_to_date()
        i = self._check_index(index)
        return i - 1 if i > 0 else self._n - 1

    def next_vertex(self, index: int) -> FramePoint2D:
        return self.vertex(self.next_vertex_index(index))

    def previous_vertex(self, index: int) -> FramePoint2D:
        return self.vertex(self.previous_vertex_index(index))

    def edge(self, index: int, out: Optional[FrameLineSegment2D] = None) -> FrameLineSegment2D:
        """頂点 `index` → 次の頂点 の辺（`out` 指定時はそこへ書き込む）。"""
        self._check_outputs(out)
        i = self._check_index(index)
        j = i + 1 if i + 1 < self._n else 0
        if out is not None:
            assign_output_frame(self._frame, out)
        target = out if out is not None else FrameLineSegment2D(self._frame)
        target.set(
            (self._buffer[i, 0], self._buffer[i, 1]), (self._buffer[j, 0], self._buffer[j, 1])
        )
        return target

    def __iter__(self) -> Iterator[FramePoint2D]:
        self._check_up_to_date()
        for i in range(self._n):
            yield FramePoint2D(self._frame, self._buffer[i, 0], self._buffer[i, 1])

    def vertices_in_clockwise_order(self, start: int, end: int) -> list[FramePoint2D]:
        """`start` から `end` まで（両端含む、末尾で折り返す）の頂点のコピー。"""
        self._check_up_to_date()
        i = self._check_index(start)
        j = self._check_index(end)
        out = [self.vertex(i)]
        while i != j:
            i = i + 1 if i + 1 < self._n else 0
            out.append(self.vertex(i))
        return out

    # ── 頂点の収集（検査はすべて追加前に行う） ─────
    def _to_local(
        self, source: Optional[ReferenceFrame], target: Optional[ReferenceFrame], coords: np.ndarray
    ) -> np.ndarray:
        transform = transform_between(source, target)
        if transform is None:
            return coords
        logger.debug(
            "matching frame: %s -> %s",
            getattr(source, "name", None),
            getattr(target, "name", None),
        )
        return transform.transform_points(coords)

    def _collect(
        self, supplier: Any, matching: bool, frame: Optional[ReferenceFrame]
    ) -> np.ndarray:
        """頂点供給元を `(k, 2)` 配列（`frame` 表現）に変換する。

        - `FrameConvexPolygon2D`: 有効な頂点列（フレーム付き）
        - `np.ndarray`: `(k, 2)` のフレーム無し座標
        - その他のシーケンス: 要素ごとにフレーム付き点 or 長さ 2 の座標
        """
        if isinstance(supplier, FrameConvexPolygon2D):
            coords = supplier._buffer[: supplier._n].copy()
            if matching:
                return self._to_local(supplier._frame, frame, coords)
            check_frame_match(frame, supplier)
            return coords
        if isinstance(supplier, np.ndarray):
            arr = np.asarray(supplier, dtype=np.float64)
            if arr.size == 0:
                return np.empty((0, 2), dtype=np.float64)
            if arr.ndim != 2 or arr.shape[1] != 2:
                raise ValueError(f"vertices must have shape (N, 2), got {arr.shape}")
            return arr.copy()

        items = list(supplier)
        if not matching:
            check_frame_match(frame, *items)
        coords = np.empty((len(items), 2), dtype=np.float64)
        for k, item in enumerate(items):
            coords[k] = read_xy(item)
        if matching:
            for k, item in enumerate(items):
                if isinstance(item, FrameHolder) and item.frame is not frame:
                    coords[k] = self._to_local(item.frame, frame, coords[k : k + 1])[0]
        return coords

    def _append(self, coords: np.ndarray) -> None:
        k = coords.shape[0]
        required = self._n + k
        if required > self._buffer.shape[0]:
            cap = self._buffer.shape[0]
            while cap < required:
                cap *= 2
            grown = np.empty((cap, 2), dtype=np.float64)
            grown[: self._n] = self._buffer[: self._n]
            logger.debug("vertex buffer grown: %d -> %d", self._buffer.shape[0], cap)
            self._buffer = grown
        self._buffer[self._n : required] = coords
        self._n = required
        self._up_to_date = False

    # ── 頂点編集 ───────────────────────────────────
    def clear(self) -> None:
        """頂点を 0 個にして stale にする（フレームは変えない）。"""
        self._n = 0
        self._up_to_date = False

    def clear_and_update(self) -> None:
        self.clear()
        self.update()

    def add_vertex(self, vertex: Any) -> None:
        """厳格: 頂点を末尾に追加する（フレーム無しの座標は信頼して追加）。"""
        check_frame_match(self._frame, vertex)
        x, y = read_xy(vertex)
        self._append(np.array([[x, y]], dtype=np.float64))

    def add_vertex_xy(self, x: float, y: float, frame: Optional[ReferenceFrame] = None) -> None:
        """座標で頂点を追加する。`frame` を渡した場合はポリゴンのフレームと厳格検査する。"""
        if frame is not None and frame is not self._frame:
            raise FrameMismatchError(self._frame, frame)
        self._append(np.array([[x, y]], dtype=np.float64))

    def add_vertex_matching_frame(self, vertex: Any) -> None:
        """頂点をポリゴンのフレームへ変換してから追加する。"""
        src = vertex.frame if isinstance(vertex, FrameHolder) else self._frame
        self.add_vertex_matching_frame_xy(src, *read_xy(vertex))

    def add_vertex_matching_frame_xy(
        self, frame: Optional[ReferenceFrame], x: float, y: float
    ) -> None:
        coords = self._to_local(frame, self._frame, np.array([[x, y]], dtype=np.float64))
        self._append(coords)

    def add_vertices(self, supplier: Any) -> None:
        """厳格: 供給元の頂点を順に追加する（全要素の検査後に追加するため部分追加は起きない）。"""
        self._append(self._collect(supplier, False, self._frame))

    def add_vertices_matching_frame(self, supplier: Any) -> None:
        self._append(self._collect(supplier, True, self._frame))

    def remove_vertex(self, index: int) -> None:
        """バッファ上の `index` 番目の頂点を取り除き、stale にする。"""
        if index < 0 or index >= self._n:
            raise IndexError(f"vertex index {index} out of range [0, {self._n})")
        self._buffer[index : self._n - 1] = self._buffer[index + 1 : self._n].copy()
        self._n -= 1
        self._up_to_date = False

    def update(self) -> None:
        """凸包を計算して時計回りに並べ替え、面積と重心を更新して up-to-date にする。"""
        before = self._n
        self._n = int(
            polygon_ops.inplace_convex_hull(self._buffer, self._n, settings.get().HULL_EPSILON)
        )
        self._area, self._cx, self._cy = (
            float(v) for v in polygon_ops.area_and_centroid(self._buffer, self._n)
        )
        self._up_to_date = True
        logger.debug("hull updated: %d -> %d vertices", before, self._n)

    def _set_coords(self, parts: Sequence[np.ndarray]) -> None:
        self.clear()
        for coords in parts:
            self._append(coords)
        self.update()

    def set(self, first: Any, second: Any = None) -> None:
        """厳格: `clear` → 供給元の頂点を追加 → `update`（2 つ渡すと和集合の凸包）。"""
        parts = [self._collect(first, False, self._frame)]
        if second is not None:
            parts.append(self._collect(second, False, self._frame))
        self._set_coords(parts)

    def set_matching_frame(self, first: Any, second: Any = None) -> None:
        parts = [self._collect(first, True, self._frame)]
        if second is not None:
            parts.append(self._collect(second, True, self._frame))
        self._set_coords(parts)

    def set_including_frame(
        self, frame: Optional[ReferenceFrame], first: Any, second: Any = None
    ) -> None:
        """フレームを `frame` に付け替えてから `set` する（検査は新しいフレームに対して行う）。"""
        parts = [self._collect(first, False, frame)]
        if second is not None:
            parts.append(self._collect(second, False, frame))
        self._frame = frame
        self._set_coords(parts)

    # ── 変形 ───────────────────────────────────────
    def scale(self, factor: float, pivot: Any = None) -> None:
        """`pivot`（省略時は重心）を中心に拡大縮小する。

        正の倍率では頂点数と順序が保たれるため凸包は再計算しない。0 以下では `update()` し直す。
        """
        check_frame_match(self._frame, pivot)
        self._check_up_to_date()
        if self._n == 0:
            return
        px, py = (self._cx, self._cy) if pivot is None else read_xy(pivot)
        f = float(factor)
        v = self._buffer[: self._n]
        v[:, 0] = px + f * (v[:, 0] - px)
        v[:, 1] = py + f * (v[:, 1] - py)
        if f > 0.0:
            self._cx = px + f * (self._cx - px)
            self._cy = py + f * (self._cy - py)
            self._area *= f * f
        else:
            self.update()

    def translate(self, vector: Any) -> None:
        """厳格: すべての頂点と重心を平行移動する（順序・頂点数は不変）。"""
        check_frame_match(self._frame, vector)
        self._check_up_to_date()
        tx, ty = read_xy(vector)
        self._buffer[: self._n, 0] += tx
        self._buffer[: self._n, 1] += ty
        self._cx += tx
        self._cy += ty

    def translate_copy(self, vector: Any) -> "FrameConvexPolygon2D":
        """平行移動した新しいポリゴンを返す（自身は変更しない）。"""
        check_frame_match(self._frame, vector)
        out = self.copy()
        out.translate(vector)
        return out

    def copy(self) -> "FrameConvexPolygon2D":
        """独立したコピー（同じフレーム・同じライフサイクル状態）。"""
        out = FrameConvexPolygon2D(self._frame, capacity=max(1, self._n))
        out._buffer[: self._n] = self._buffer[: self._n]
        out._n = self._n
        out._up_to_date = self._up_to_date
        out._area, out._cx, out._cy = self._area, self._cx, self._cy
        return out

    def apply_transform(self, transform: RigidTransform2D) -> None:
        """剛体変換を適用する。up-to-date なら凸包を再計算して先頭頂点の規約を保つ。"""
        v = self._buffer[: self._n]
        transform.transform_points(v, out=v)
        if self._up_to_date:
            self.update()

    def apply_inverse_transform(self, transform: RigidTransform2D) -> None:
        v = self._buffer[: self._n]
        transform.inverse_transform_points(v, out=v)
        if self._up_to_date:
            self.update()

    def change_frame(self, desired: ReferenceFrame) -> None:
        """頂点を `desired` へ変換し、フレームを付け替える（フレーム無しのポリゴンは付け替えのみ）。"""
        transform = transform_between(self._frame, desired)
        if transform is not None:
            logger.debug(
                "polygon frame change: %s -> %s",
                getattr(self._frame, "name", None),
                getattr(desired, "name", None),
            )
            self.apply_transform(transform)
        self._frame = desired

    # ── 点との問い合わせ ───────────────────────────
    def _point_query(self, point: Any) -> tuple[float, float]:
        check_frame_match(self._frame, point)
        self._check_up_to_date()
        return read_xy(point)

    def signed_distance(self, point: Any) -> float:
        """符号付き距離（内側で負、外側で正、境界で 0、空なら NaN）。"""
        x, y = self._point_query(point)
        return float(polygon_ops.signed_distance(x, y, self._buffer, self._n))

    def distance(self, point: Any) -> float:
        """外側の点までの距離（内側・境界は 0、空なら NaN）。"""
        d = self.signed_distance(point)
        if math.isnan(d):
            return d
        return d if d > 0.0 else 0.0

    def is_point_inside(self, point: Any, epsilon: float = 0.0) -> bool:
        """点が内側か（境界を含む）。`epsilon > 0` で外側へ、`< 0` で内側へ判定を緩める/締める。"""
        return self.signed_distance(point) <= epsilon

    def point_is_on_perimeter(self, point: Any, epsilon: float = 1e-10) -> bool:
        return abs(self.signed_distance(point)) < epsilon

    def closest_vertex_index(self, point: Any) -> int:
        """点に最も近い頂点（同値は小さい index）。空なら -1。"""
        x, y = self._point_query(point)
        return int(polygon_ops.closest_vertex_index_to_point(x, y, self._buffer, self._n))

    def closest_vertex(self, point: Any, out: Any) -> bool:
        check_frame_match(self._frame, point)
        self._check_outputs(out)
        index = self.closest_vertex_index(point)
        assign_output_frame(self._frame, out)
        if index < 0:
            return False
        write_xy(out, self._buffer[index, 0], self._buffer[index, 1])
        return True

    def closest_vertex_copy(self, point: Any) -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        return out if self.closest_vertex(point, out) else None

    def closest_vertex_index_to_line(self, line: LineLike) -> int:
        """直線までの垂直距離が最も小さい頂点。空なら -1。"""
        check_frame_match(self._frame, line)
        self._check_up_to_date()
        sx, sy, dx, dy = _line_xy(line)
        return int(
            polygon_ops.closest_vertex_index_to_line(sx, sy, dx, dy, self._buffer, self._n)
        )

    def closest_vertex_to_line(self, line: LineLike, out: Any) -> bool:
        check_frame_match(self._frame, line)
        self._check_outputs(out)
        index = self.closest_vertex_index_to_line(line)
        assign_output_frame(self._frame, out)
        if index < 0:
            return False
        write_xy(out, self._buffer[index, 0], self._buffer[index, 1])
        return True

    def closest_vertex_to_line_copy(self, line: LineLike) -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        return out if self.closest_vertex_to_line(line, out) else None

    def closest_edge_index(self, point: Any) -> int:
        """点に最も近い辺（頂点 index = 辺の始点）。頂点 1 個以下なら -1。"""
        x, y = self._point_query(point)
        return int(polygon_ops.closest_edge_index_to_point(x, y, self._buffer, self._n))

    def closest_edge(self, point: Any, out: FrameLineSegment2D) -> bool:
        check_frame_match(self._frame, point)
        self._check_outputs(out)
        index = self.closest_edge_index(point)
        assign_output_frame(self._frame, out)
        if index < 0:
            return False
        self.edge(index, out)
        return True

    def closest_edge_copy(self, point: Any) -> Optional[FrameLineSegment2D]:
        out = FrameLineSegment2D(self._frame)
        return out if self.closest_edge(point, out) else None

    # ── 視線（line-of-sight） ─────────────────────
    def line_of_sight_start_index(self, observer: Any) -> int:
        """外部観測者から見える頂点範囲の始点（時計回り）。観測者が内側/境界上なら -1。"""
        x, y = self._point_query(observer)
        return int(polygon_ops.line_of_sight_start_index(x, y, self._buffer, self._n))

    def line_of_sight_end_index(self, observer: Any) -> int:
        """外部観測者から見える頂点範囲の終点（時計回り）。観測者が内側/境界上なら -1。"""
        x, y = self._point_query(observer)
        return int(polygon_ops.line_of_sight_end_index(x, y, self._buffer, self._n))

    def line_of_sight_indices(self, observer: Any) -> Optional[tuple[int, int]]:
        start = self.line_of_sight_start_index(observer)
        end = self.line_of_sight_end_index(observer)
        if start < 0 or end < 0:
            return None
        return start, end

    def line_of_sight_start_vertex(self, observer: Any, out: Any) -> bool:
        check_frame_match(self._frame, observer)
        self._check_outputs(out)
        index = self.line_of_sight_start_index(observer)
        assign_output_frame(self._frame, out)
        if index < 0:
            return False
        write_xy(out, self._buffer[index, 0], self._buffer[index, 1])
        return True

    def line_of_sight_end_vertex(self, observer: Any, out: Any) -> bool:
        check_frame_match(self._frame, observer)
        self._check_outputs(out)
        index = self.line_of_sight_end_index(observer)
        assign_output_frame(self._frame, out)
        if index < 0:
            return False
        write_xy(out, self._buffer[index, 0], self._buffer[index, 1])
        return True

    def line_of_sight_vertices(
        self, observer: Any
    ) -> Optional[tuple[FramePoint2D, FramePoint2D]]:
        indices = self.line_of_sight_indices(observer)
        if indices is None:
            return None
        return self.vertex(indices[0]), self.vertex(indices[1])

    def can_observer_see_edge(self, edge_index: int, observer: Any) -> bool:
        """観測者が辺 `edge_index` の外側に厳密にいるか。"""
        x, y = self._point_query(observer)
        i = self._check_index(edge_index)
        return bool(polygon_ops.can_observer_see_edge(x, y, self._buffer, self._n, i))

    # ── 交差 ───────────────────────────────────────
    def _pack_intersections(
        self, result: tuple, first: Any, second: Any
    ) -> int:
        count, x1, y1, x2, y2 = result
        count = int(count)
        if count >= 1:
            write_xy(first, x1, y1)
        else:
            write_xy(first, math.nan, math.nan)
        if second is not None:
            if count == 2:
                write_xy(second, x2, y2)
            else:
                write_xy(second, math.nan, math.nan)
        return count

    def _copy_intersections(self, result: tuple) -> Optional[tuple[FramePoint2D, ...]]:
        count, x1, y1, x2, y2 = result
        if count == 0:
            return None
        if count == 1:
            return (FramePoint2D(self._frame, x1, y1),)
        return FramePoint2D(self._frame, x1, y1), FramePoint2D(self._frame, x2, y2)

    def _line_intersections(self, line: LineLike) -> tuple:
        check_frame_match(self._frame, line)
        self._check_up_to_date()
        sx, sy, dx, dy = _line_xy(line)
        eps = settings.get().INTERSECTION_EPSILON
        return polygon_ops.intersection_with_line(sx, sy, dx, dy, self._buffer, self._n, eps)

    def _ray_intersections(self, ray: LineLike) -> tuple:
        check_frame_match(self._frame, ray)
        self._check_up_to_date()
        ox, oy, dx, dy = _line_xy(ray)
        eps = settings.get().INTERSECTION_EPSILON
        return polygon_ops.intersection_with_ray(ox, oy, dx, dy, self._buffer, self._n, eps)

    def _segment_intersections(self, segment: SegmentLike) -> tuple:
        check_frame_match(self._frame, segment)
        self._check_up_to_date()
        ax, ay, bx, by = _segment_xy(segment)
        eps = settings.get().INTERSECTION_EPSILON
        return polygon_ops.intersection_with_segment(ax, ay, bx, by, self._buffer, self._n, eps)

    def intersection_with_line(self, line: LineLike, first: Any, second: Any = None) -> int:
        """直線との交点数（0/1/2）を返し、交点を `first`/`second` へ書き込む（未使用分は NaN）。

        辺と同一直線上の場合は、その辺の両端点が交点になる。
        """
        check_frame_match(self._frame, line)
        self._check_outputs(first, second)
        result = self._line_intersections(line)
        assign_output_frame(self._frame, first, second)
        return self._pack_intersections(result, first, second)

    def intersection_with_line_copy(self, line: LineLike) -> Optional[tuple[FramePoint2D, ...]]:
        return self._copy_intersections(self._line_intersections(line))

    def intersection_with_ray(self, ray: LineLike, first: Any, second: Any = None) -> int:
        """半直線（起点 + 方向）との交点。起点より後方の交点は数えない。"""
        check_frame_match(self._frame, ray)
        self._check_outputs(first, second)
        result = self._ray_intersections(ray)
        assign_output_frame(self._frame, first, second)
        return self._pack_intersections(result, first, second)

    def intersection_with_ray_copy(self, ray: LineLike) -> Optional[tuple[FramePoint2D, ...]]:
        return self._copy_intersections(self._ray_intersections(ray))

    def intersection_with_segment(
        self, segment: SegmentLike, first: Any, second: Any = None
    ) -> int:
        """線分との交点。線分の端点が辺上にある場合も交点に数える。"""
        check_frame_match(self._frame, segment)
        self._check_outputs(first, second)
        result = self._segment_intersections(segment)
        assign_output_frame(self._frame, first, second)
        return self._pack_intersections(result, first, second)

    def intersection_with_segment_copy(
        self, segment: SegmentLike
    ) -> Optional[tuple[FramePoint2D, ...]]:
        return self._copy_intersections(self._segment_intersections(segment))

    # ── 射影・最近点 ───────────────────────────────
    def orthogonal_projection(self, point: Any, out: Any = None) -> bool:
        """点を多角形へ射影する。`out` 省略時は `point` をその場で書き換える。

        - 外側の点: 境界上の最近点を書き込み True。
        - 内側（境界を含む）の点: 射影は恒等。`out` に点そのものを書き込み False を返す。
        - 空のポリゴン: 何も書き込まず False。
        """
        target = point if out is None else out
        check_frame_match(self._frame, point)
        self._check_outputs(target)
        assign_output_frame(self._frame, target)
        x, y = read_xy(point)
        ok, qx, qy = polygon_ops.orthogonal_projection(x, y, self._buffer, self._n)
        if ok:
            write_xy(target, qx, qy)
            return True
        if self._n > 0:
            write_xy(target, x, y)
        return False

    def orthogonal_projection_copy(self, point: Any) -> Optional[FramePoint2D]:
        """射影のコピー（内側の点はそのコピー、空のポリゴンは None）。"""
        out = FramePoint2D(self._frame)
        self.orthogonal_projection(point, out)
        if self._n == 0:
            return None
        return out

    def closest_point_with_ray(self, ray: LineLike, out: Any) -> bool:
        """交差しない半直線に最も近い多角形上の点。半直線が当たる/空なら False。"""
        check_frame_match(self._frame, ray)
        self._check_outputs(out)
        assign_output_frame(self._frame, out)
        ox, oy, dx, dy = _line_xy(ray)
        ok, x, y = polygon_ops.closest_point_with_ray(
            ox, oy, dx, dy, self._buffer, self._n, settings.get().INTERSECTION_EPSILON
        )
        if not ok:
            return False
        write_xy(out, x, y)
        return True

    def closest_point_with_ray_copy(self, ray: LineLike) -> Optional[FramePoint2D]:
        out = FramePoint2D(self._frame)
        return out if self.closest_point_with_ray(ray, out) else None

    # ── 比較 ───────────────────────────────────────
    def equals(self, other: Any) -> bool:
        """同一フレームかつ頂点列が完全一致（フレーム不一致は False）。"""
        if not isinstance(other, FrameConvexPolygon2D) or other._frame is not self._frame:
            return False
        if other._n != self._n:
            return False
        return bool(np.array_equal(self._buffer[: self._n], other._buffer[: other._n]))

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def epsilon_equals(self, other: Any, epsilon: float) -> bool:
        """頂点ごとの成分差が `epsilon` 以下（フレーム不一致は False）。"""
        if not isinstance(other, FrameConvexPolygon2D) or other._frame is not self._frame:
            return False
        if other._n != self._n:
            return False
        diff = np.abs(self._buffer[: self._n] - other._buffer[: other._n])
        return bool(np.all(diff <= epsilon))

    def geometrically_equals(self, other: "FrameConvexPolygon2D", epsilon: float) -> bool:
        """厳格: 開始頂点の巡回ずれ・巻き方向の違いを許して同じ形状か。"""
        check_frame_match(self._frame, other)
        self._check_up_to_date()
        other._check_up_to_date()
        n = self._n
        if other._n != n:
            return False
        if n == 0:
            return True
        a = self._buffer[:n]
        b = other._buffer[:n]
        j = int(polygon_ops.closest_vertex_index_to_point(a[0, 0], a[0, 1], b, n))
        if math.hypot(a[0, 0] - b[j, 0], a[0, 1] - b[j, 1]) > epsilon:
            return False
        for step in (1, -1):
            idx = (j + step * np.arange(n)) % n
            if bool(np.all(np.hypot(*(a - b[idx]).T) <= epsilon)):
                return True
        return False

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        name = getattr(self._frame, "name", None)
        state = "up-to-date" if self._up_to_date else "stale"
        pts = ", ".join(f"({x:.4g}, {y:.4g})" for x, y in self._buffer[: self._n])
        return f"FrameConvexPolygon2D([{pts}], {state}) - {name}"


__all__ = ["FrameConvexPolygon2D"]
