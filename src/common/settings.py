"""
どこで: `common.settings`
何を: 幾何カーネルの許容誤差・バッファ容量・JIT 切替などを型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

読み込み順（後勝ち）:
1) `_Settings` の既定値
2) `configs/default.yaml` / ルート `config.yaml` の `geometry:` セクション（`util.utils.load_config`）
3) 環境変数 `FGEOM_*`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from util.utils import load_config

from .env import env_bool, env_float, env_int, env_str


@dataclass
class _Settings:
    # JIT
    USE_NUMBA: bool = True

    # 許容誤差
    HULL_EPSILON: float = 1e-7
    INTERSECTION_EPSILON: float = 1e-7

    # ポリゴンの頂点バッファ
    POLYGON_INITIAL_CAPACITY: int = 8

    # Misc
    LOG_LEVEL: str = "INFO"


_DEFAULTS = _Settings()
_settings = _Settings()


def _yaml_section() -> Mapping[str, Any]:
    section = load_config().get("geometry", {})
    return section if isinstance(section, dict) else {}


def _coerce(value: Any, fallback: Any) -> Any:
    """YAML 値を既定値の型へ寄せる（失敗時は既定値）。"""
    try:
        if isinstance(fallback, bool):
            return bool(value)
        if isinstance(fallback, int):
            return int(value)
        if isinstance(fallback, float):
            return float(value)
        return str(value)
    except (TypeError, ValueError):
        return fallback


def reload_from_env() -> None:
    """YAML 構成と環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int`、float は `env_float` を使用。
    - 許容誤差は下限 0、バッファ容量は下限 1 に丸める。
    """
    base = _Settings()
    for key, value in _yaml_section().items():
        name = str(key).upper()
        if hasattr(base, name):
            setattr(base, name, _coerce(value, getattr(_DEFAULTS, name)))

    # JIT
    _settings.USE_NUMBA = env_bool("FGEOM_USE_NUMBA", base.USE_NUMBA)

    # 許容誤差（下限丸め）
    _settings.HULL_EPSILON = env_float("FGEOM_HULL_EPSILON", base.HULL_EPSILON, min_value=0.0)
    _settings.INTERSECTION_EPSILON = env_float(
        "FGEOM_INTERSECTION_EPSILON", base.INTERSECTION_EPSILON, min_value=0.0
    )

    # バッファ
    _settings.POLYGON_INITIAL_CAPACITY = max(
        1, env_int("FGEOM_POLYGON_INITIAL_CAPACITY", base.POLYGON_INITIAL_CAPACITY, min_value=1) or 1
    )

    # Misc
    _settings.LOG_LEVEL = env_str("FGEOM_LOG_LEVEL", base.LOG_LEVEL)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
