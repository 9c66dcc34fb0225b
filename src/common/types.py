"""
どこで: `common` の型定義。
何を: 2D 座標タプル `Vec2` などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from __future__ import annotations

Vec2 = tuple[float, float]

__all__ = ["Vec2"]
