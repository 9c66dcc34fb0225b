"""
どこで: `frames.reference_frame`
何を: 座標フレームの木のノード `ReferenceFrame`。同一性（identity）で比較され、
      親への剛体変換からルートまでの変換を構築時に 1 度だけ計算して保持する。
なぜ: フレーム付き値が「同じフレームか」を安価に判定し、異なるフレーム間では
      `transform_to_desired_frame` で変換を得られるようにするため。

グローバルなワールドフレームは持たない。ルートは `ReferenceFrame(name)` で明示的に作り、
利用側へ引数として渡す。
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from common.errors import FrameTreeError

from .transform import RigidTransform2D

logger = logging.getLogger(__name__)


class ReferenceFrame:
    """不変のフレームノード。

    Parameters
    ----------
    name : str
        表示・診断用の名前（一意性は要求しない）。
    parent : ReferenceFrame | None, default None
        親フレーム。`None` ならルート。
    transform_to_parent : RigidTransform2D | None, default None
        このフレームの座標を親フレームの座標へ写す変換。省略時は恒等変換。

    Notes
    -----
    - 等価性は同一性（`is`）。`__eq__` は上書きしない。
    - 構築後に親・変換は変わらないため、ルートまでの変換はキャッシュしてよい。
    """

    __slots__ = ("_name", "_parent", "_to_parent", "_to_root", "_root")

    def __init__(
        self,
        name: str,
        parent: Optional["ReferenceFrame"] = None,
        transform_to_parent: Optional[RigidTransform2D] = None,
    ) -> None:
        if parent is None and transform_to_parent is not None:
            raise ValueError("a root frame cannot have a transform to parent")
        self._name = str(name)
        self._parent = parent
        self._to_parent = (
            transform_to_parent.copy()
            if transform_to_parent is not None
            else RigidTransform2D.identity()
        )
        if parent is None:
            self._root = self
            self._to_root = RigidTransform2D.identity()
        else:
            self._root = parent._root
            self._to_root = parent._to_root @ self._to_parent
        logger.debug("frame created: %s (root=%s)", self._name, self._root._name)

    # ── 属性 ───────────────────────────────────────
    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["ReferenceFrame"]:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def root(self) -> "ReferenceFrame":
        return self._root

    @property
    def transform_to_parent(self) -> RigidTransform2D:
        return self._to_parent.copy()

    @property
    def transform_to_root(self) -> RigidTransform2D:
        return self._to_root.copy()

    # ── 木の操作 ───────────────────────────────────
    def is_same_frame(self, other: Any) -> bool:
        return self is other

    def verify_same_roots(self, other: "ReferenceFrame") -> None:
        """ルートが異なれば `FrameTreeError`。"""
        if self._root is not other._root:
            raise FrameTreeError(
                f"frames {self._name!r} and {other._name!r} do not share the same root "
                f"({self._root._name!r} vs {other._root._name!r})"
            )

    def transform_to_desired_frame(self, desired: "ReferenceFrame") -> RigidTransform2D:
        """このフレームの座標を `desired` の座標へ写す変換を返す。"""
        if desired is self:
            return RigidTransform2D.identity()
        self.verify_same_roots(desired)
        return desired._to_root.inverse() @ self._to_root

    def transform_from_this_to_desired_frame(self, desired: "ReferenceFrame", obj: Any) -> None:
        """`obj.apply_transform` でこのフレームから `desired` へ変換する（同一なら何もしない）。"""
        if desired is self:
            return
        obj.apply_transform(self.transform_to_desired_frame(desired))

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        parent = self._parent._name if self._parent is not None else None
        return f"ReferenceFrame({self._name!r}, parent={parent!r})"


__all__ = ["ReferenceFrame"]
