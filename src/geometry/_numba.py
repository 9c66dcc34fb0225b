"""
どこで: `geometry._numba`
何を: 数値カーネル用のデコレータ `kernel` を提供する。
なぜ: `FGEOM_USE_NUMBA=0` でコンパイルを止め、同じ関数本体を素の Python として実行・デバッグできるようにするため。
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from numba import njit

from common import settings

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def kernel(fn: F) -> F:
    """`USE_NUMBA` が真なら `njit(cache=True)` で包み、偽なら関数をそのまま返す。"""
    if settings.get().USE_NUMBA:
        return njit(cache=True)(fn)  # type: ignore[return-value]
    logger.debug("numba disabled: %s runs as plain Python", fn.__qualname__)
    return fn


__all__ = ["kernel"]
