"""얼굴 랜드마크 인덱스 및 렌더링 상수 정의"""

from typing import Dict

# MediaPipe FaceMesh 기준점 인덱스
# 트래커 토폴로지와 정확히 일치해야 함 (다른 트래커로 교체 시 재정의 필요)
ANCHOR_INDICES: Dict[str, int] = {
    'left_temple': 127,    # 왼쪽 관자놀이
    'right_temple': 356,   # 오른쪽 관자놀이
    'forehead_top': 10,    # 이마 상단
    'nose_bridge': 6,      # 코 다리 상단
    'chin': 152,           # 턱 끝
    'left_jaw': 234,       # 왼쪽 턱선 (광대 아래)
    'right_jaw': 454,      # 오른쪽 턱선
}

# FaceMesh 랜드마크 개수 (refine_landmarks=True 이면 478)
FACEMESH_LANDMARKS = 468

# Head unit: max(HEAD_UNIT_FLOOR, (face_width + face_height) * HEAD_UNIT_FACTOR)
HEAD_UNIT_FLOOR = 80.0
HEAD_UNIT_FACTOR = 0.35

# 실루엣 그림자 (blur, 아래쪽 오프셋, px)
SHADOW_BLUR = 18.0
SHADOW_OFFSET_Y = 8.0

# 디테일 레이어 알파 가산값
DETAIL_ALPHA_BOOST = 0.12

# 에셋 박스 비율
ASSET_WIDTH_FACTOR = 1.55
ASSET_HEIGHT_FACTOR = 1.35
ASSET_VERTICAL_BIAS = 0.42

NO_FACE_NOTE = "Move into frame and face the camera."
