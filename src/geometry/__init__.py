"""
どこで: `geometry` パッケージ（フレーム非依存の数値カーネル層）。
何を: 直線・線分・凸多角形の基本アルゴリズムを、素の float と `(N, 2)` float64 配列だけで提供する。
なぜ: フレーム整合の検査（`frames`/`polygon` 層）と数値計算を分離し、カーネルを Numba で
      JIT 化してホットループでも割り当て無しで呼べるようにするため。
"""

from . import line_ops, polygon_ops

__all__ = ["line_ops", "polygon_ops"]
