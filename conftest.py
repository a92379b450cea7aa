"""공용 테스트 fixture: 합성 랜드마크 / 표면 / 설정"""

import pytest

from hair_overlay.config.constants import ANCHOR_INDICES, FACEMESH_LANDMARKS
from hair_overlay.config.settings import RenderConfig
from hair_overlay.core.surface import Surface
from hair_overlay.models import HairStyle, Landmark

# 정규화 좌표 기준 얼굴 (관자놀이 x=0.3/0.7, 이마 y=0.2, 턱 y=0.8, 나머지 y=0.5)
CANONICAL_ANCHORS = {
    'left_temple': (0.3, 0.5),
    'right_temple': (0.7, 0.5),
    'forehead_top': (0.5, 0.2),
    'nose_bridge': (0.5, 0.35),
    'chin': (0.5, 0.8),
    'left_jaw': (0.32, 0.65),
    'right_jaw': (0.68, 0.65),
}

VECTOR_STYLES = [s for s in HairStyle if s is not HairStyle.NONE]


def make_landmarks(anchors=None, count=FACEMESH_LANDMARKS):
    """기준점만 지정하고 나머지는 (0.5, 0.5) 로 채운 랜드마크 세트"""
    points = [Landmark(0.5, 0.5) for _ in range(count)]
    for name, (x, y) in (anchors or CANONICAL_ANCHORS).items():
        points[ANCHOR_INDICES[name]] = Landmark(x, y)
    return points


@pytest.fixture
def landmarks():
    return make_landmarks()


@pytest.fixture
def degenerate_landmarks():
    """관자놀이 겹침 + 이마 == 턱 (폭/높이 0)"""
    return make_landmarks({name: (0.5, 0.5) for name in ANCHOR_INDICES})


@pytest.fixture
def surface():
    return Surface(1280, 720)


@pytest.fixture
def small_surface():
    return Surface(320, 180)


@pytest.fixture
def config():
    return RenderConfig(style=HairStyle.BUZZ, color=(43, 27, 18), opacity=0.85,
                        scale=1.0, offset_x=0.0, offset_y=0.0, mirror=False)
