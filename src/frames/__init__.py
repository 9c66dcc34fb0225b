"""
どこで: `frames` パッケージ。
何を: 参照フレームの木・剛体変換・フレーム整合プロトコルと、フレーム付きの点/ベクトル/姿勢/直線/線分。
なぜ: 幾何値を常に「どのフレームで表現されているか」と対で扱い、異なるフレームの値を
      混ぜる誤りを使用時点で検出するため。
"""

from .line import FrameLine2D
from .line_segment import FrameLineSegment2D
from .orientation import FrameOrientation2D
from .protocol import (
    FrameHolder,
    MovableFrameHolder,
    assign_output_frame,
    check_frame_match,
    frame_of,
    transform_between,
)
from .reference_frame import ReferenceFrame
from .transform import RigidTransform2D
from .tuples import (
    FixedFramePoint2D,
    FixedFrameVector2D,
    FramePoint2D,
    FrameVector2D,
    read_xy,
    write_xy,
)

__all__ = [
    "ReferenceFrame",
    "RigidTransform2D",
    "FrameHolder",
    "MovableFrameHolder",
    "check_frame_match",
    "assign_output_frame",
    "frame_of",
    "transform_between",
    "FixedFramePoint2D",
    "FixedFrameVector2D",
    "FramePoint2D",
    "FrameVector2D",
    "FrameOrientation2D",
    "FrameLine2D",
    "FrameLineSegment2D",
    "read_xy",
    "write_xy",
]
