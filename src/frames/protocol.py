"""
どこで: `frames.protocol`
何を: フレーム整合プロトコル（厳格検査・出力フレームの付け替え）と、その能力を表すミックスイン。
なぜ: 点・線・ポリゴンなど全てのフレーム付き型が同じ規約で検査/付け替えを行い、
      「検査する」か「matching-frame として変換する」以外の黙った経路を作らないため。

能力（capability）:
- `FrameHolder`: フレーム同一性 + 読み取り（`frame` は読み取り専用）。固定フレーム値の基底。
- `MovableFrameHolder`: さらに `set_reference_frame` でフレームの付け替えができる。

規約:
- 厳格演算は `check_frame_match(owner, *operands)` を数値計算・変更の前に呼ぶ。
  フレームを持たない（素のシーケンス/配列の）オペランドは信頼して検査しない。
- 呼び出し側が渡した出力コンテナは `assign_output_frame(owner, out)` を通す。
  可動フレームなら無条件に付け替え、固定フレームなら検査、フレーム無しなら何もしない。
"""

from __future__ import annotations

from typing import Any, Optional

from common.errors import FrameMismatchError, FrameTreeError

from .reference_frame import ReferenceFrame
from .transform import RigidTransform2D


class FrameHolder:
    """フレーム同一性を持つ値の基底ミックスイン（実体は各クラスの `_frame` スロット）。"""

    __slots__ = ()

    _frame: Optional[ReferenceFrame]

    @property
    def frame(self) -> Optional[ReferenceFrame]:
        return self._frame

    def is_same_frame_as(self, other: Any) -> bool:
        return isinstance(other, FrameHolder) and other._frame is self._frame

    def check_frame_match(self, *others: Any) -> None:
        """自身のフレームに対して `others` を厳格検査する。"""
        check_frame_match(self._frame, *others)


class MovableFrameHolder(FrameHolder):
    """フレームの付け替え（relabel）ができる値のミックスイン。"""

    __slots__ = ()

    def set_reference_frame(self, frame: Optional[ReferenceFrame]) -> None:
        """座標はそのままにフレームだけを付け替える（変換はしない）。"""
        self._frame = frame


def frame_of(value: Any) -> Optional[ReferenceFrame]:
    """フレーム付き値ならそのフレーム、そうでなければ None。"""
    if isinstance(value, FrameHolder):
        return value._frame
    return None


def is_frame_tagged(value: Any) -> bool:
    return isinstance(value, FrameHolder)


def check_frame_match(owner: Optional[ReferenceFrame], *operands: Any) -> None:
    """フレーム付きオペランドがすべて `owner` と同一フレームか検査する。

    Raises
    ------
    FrameMismatchError
        いずれかのオペランドのフレームが `owner` と同一でない場合。
    """
    for op in operands:
        if isinstance(op, FrameHolder) and op._frame is not owner:
            raise FrameMismatchError(owner, op._frame)


def check_output_frame(owner: Optional[ReferenceFrame], *outs: Any) -> None:
    """固定フレームの出力コンテナだけを検査する（付け替えは行わない）。"""
    for out in outs:
        if isinstance(out, FrameHolder) and not isinstance(out, MovableFrameHolder):
            if out._frame is not owner:
                raise FrameMismatchError(owner, out._frame)


def assign_output_frame(owner: Optional[ReferenceFrame], *outs: Any) -> None:
    """出力コンテナのフレームを `owner` に揃える（可動: 付け替え / 固定: 検査 / 無し: 無視）。

    固定フレームの検査を先にすべて行い、不一致があれば付け替えは 1 つも行わない。
    """
    check_output_frame(owner, *outs)
    for out in outs:
        if isinstance(out, MovableFrameHolder):
            out.set_reference_frame(owner)


def transform_between(
    source: Optional[ReferenceFrame], desired: Optional[ReferenceFrame]
) -> Optional[RigidTransform2D]:
    """`source` 表現の座標を `desired` 表現へ写す変換を返す（変換不要なら None）。

    フレーム無し（`source is None`）の値は `check_frame_match` と同じく信頼し、座標をそのまま使う。
    呼び出し側は自身の状態を変える前にこれを求める。

    Raises
    ------
    FrameTreeError
        `desired` が None（フレーム付きの値をフレーム無しへ写せない）、またはルートが異なる場合。
    """
    if source is desired or source is None:
        return None
    if desired is None:
        raise FrameTreeError(f"cannot express a value of frame {source.name!r} without a frame")
    return source.transform_to_desired_frame(desired)


__all__ = [
    "FrameHolder",
    "MovableFrameHolder",
    "frame_of",
    "is_frame_tagged",
    "check_frame_match",
    "check_output_frame",
    "assign_output_frame",
    "transform_between",
]
