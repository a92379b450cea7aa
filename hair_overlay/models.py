"""데이터 모델 정의"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple

from .utils import get_logger

logger = get_logger(__name__)


class HairStyle(Enum):
    """헤어스타일 종류"""
    NONE = "none"
    BUZZ = "buzz"
    FADE = "fade"
    FRINGE = "fringe"
    POMPADOUR = "pompadour"
    LONG = "long"

    @classmethod
    def parse(cls, value) -> "HairStyle":
        """
        문자열/Enum을 HairStyle로 변환

        알 수 없는 값은 NONE으로 처리 (아무것도 그리지 않음)
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown hair style '{value}', falling back to 'none'")
            return cls.NONE


class TrackingState(Enum):
    """프레임 단위 추적 상태 (화면 표시용)"""
    TRACKING = "tracking"
    NO_FACE = "no-face"


class FrameState(Enum):
    """프레임 처리 상태 머신"""
    IDLE = "idle"
    CLEARED = "cleared"
    MIRRORED = "mirrored"
    RENDERED = "rendered"
    SKIPPED = "skipped"
    RESTORED = "restored"


class Point(NamedTuple):
    """픽셀 좌표 (x, y)"""
    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def midpoint(*points: Point) -> Point:
    """여러 점의 평균 (centroid)"""
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)


@dataclass
class Landmark:
    """단일 랜드마크 포인트"""

    x: float  # 정규화 x 좌표 (0-1)
    y: float  # 정규화 y 좌표 (0-1)
    z: float = 0.0  # 깊이 정보 (상대적)
    visibility: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'visibility': self.visibility,
        }


class Anchors(NamedTuple):
    """픽셀 공간으로 투영된 7개 해부학적 기준점"""
    left_temple: Point
    right_temple: Point
    forehead_top: Point
    nose_bridge: Point
    chin: Point
    left_jaw: Point
    right_jaw: Point

    def translated(self, dx: float, dy: float) -> "Anchors":
        return Anchors(*(p.translated(dx, dy) for p in self))


@dataclass(frozen=True)
class ReferenceFrame:
    """
    프레임별 기준 좌표계

    모든 스타일 렌더러와 에셋 합성기가 공유하는 기준점 및 스케일 단위.
    매 프레임 새로 계산되며 저장되지 않는다.
    """

    anchors: Anchors
    face_width: float
    face_height: float
    head_unit: float
    center: Point  # 관자놀이/이마 중심 + 사용자 오프셋
    offset: Point = Point(0.0, 0.0)

    @property
    def placed(self) -> Anchors:
        """사용자 오프셋이 적용된 기준점"""
        return self.anchors.translated(self.offset.x, self.offset.y)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            'anchors': {name: (round(p.x, 2), round(p.y, 2))
                        for name, p in self.anchors._asdict().items()},
            'face_width': round(self.face_width, 2),
            'face_height': round(self.face_height, 2),
            'head_unit': round(self.head_unit, 2),
            'center': (round(self.center.x, 2), round(self.center.y, 2)),
        }


@dataclass
class FrameResult:
    """프레임 렌더링 결과"""

    tracking: TrackingState
    states: Tuple[FrameState, ...] = ()
    reference_frame: Optional[ReferenceFrame] = None
    used_asset: bool = False
    note: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def status_text(self) -> str:
        return "Tracking" if self.tracking is TrackingState.TRACKING else "No face detected"

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        result = {
            'tracking': self.tracking.value,
            'states': [s.value for s in self.states],
            'used_asset': self.used_asset,
            'note': self.note,
        }
        if self.reference_frame:
            result['reference_frame'] = self.reference_frame.to_dict()
        return result
