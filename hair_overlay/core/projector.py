"""정규화 좌표 → 표면 픽셀 좌표 변환"""

from typing import Tuple

from ..models import Point


def landmark_xy(landmark) -> Tuple[float, float]:
    """Landmark / MediaPipe proto / (x, y) 튜플에서 정규화 좌표 추출"""
    if hasattr(landmark, 'x'):
        return (float(landmark.x), float(landmark.y))
    return (float(landmark[0]), float(landmark[1]))


def project(landmark, width: float, height: float) -> Point:
    """
    정규화 랜드마크를 픽셀 좌표로 투영

    표면 크기는 프레임마다 바뀔 수 있으므로 항상 현재 크기로 호출해야 한다.

    Args:
        landmark: 정규화 좌표 (x, y ∈ [0, 1], 원점 좌상단)
        width: 표면 너비 (px)
        height: 표면 높이 (px)
    """
    x, y = landmark_xy(landmark)
    return Point(x * width, y * height)
