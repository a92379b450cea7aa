"""랜드마크로부터 프레임별 기준 좌표계(ReferenceFrame) 생성"""

from typing import Dict, Sequence, Tuple

from ..config.constants import ANCHOR_INDICES, HEAD_UNIT_FACTOR, HEAD_UNIT_FLOOR
from ..config.settings import RenderConfig
from ..models import Anchors, Point, ReferenceFrame, midpoint
from ..utils.validators import validate_landmark_set
from .projector import project


def head_unit(face_width: float, face_height: float) -> float:
    """
    얼굴 크기 스케일 단위

    아주 작게(멀리) 검출된 얼굴도 최소 볼륨을 갖도록 HEAD_UNIT_FLOOR 로 하한을 둔다.
    """
    return max(HEAD_UNIT_FLOOR, (face_width + face_height) * HEAD_UNIT_FACTOR)


class ReferenceFrameBuilder:
    """기준점 투영 및 head unit 계산"""

    def __init__(self, anchor_indices: Dict[str, int] = None):
        """
        Args:
            anchor_indices: 기준점 이름 → 랜드마크 인덱스 (기본값: FaceMesh)
        """
        self.anchor_indices = dict(anchor_indices or ANCHOR_INDICES)
        missing = set(Anchors._fields) - set(self.anchor_indices)
        if missing:
            raise ValueError(f"Missing anchor indices: {sorted(missing)}")
        self.max_index = max(self.anchor_indices.values())

    def build(
        self,
        landmarks: Sequence,
        surface_size: Tuple[int, int],
        config: RenderConfig
    ) -> ReferenceFrame:
        """
        ReferenceFrame 생성 (결정적: 같은 입력 → 같은 결과)

        Args:
            landmarks: 정규화 랜드마크 세트
            surface_size: (width, height)
            config: 렌더링 설정 (오프셋만 사용)

        Raises:
            LandmarkSetError: 세트가 기준점 인덱스를 포함하지 못하는 경우
        """
        validate_landmark_set(landmarks, self.max_index)
        width, height = surface_size

        anchors = Anchors(**{
            name: project(landmarks[self.anchor_indices[name]], width, height)
            for name in Anchors._fields
        })

        face_width = anchors.left_temple.distance_to(anchors.right_temple)
        face_height = anchors.forehead_top.distance_to(anchors.chin)
        offset = Point(float(config.offset_x), float(config.offset_y))
        center = midpoint(anchors.left_temple, anchors.right_temple, anchors.forehead_top)

        return ReferenceFrame(
            anchors=anchors,
            face_width=face_width,
            face_height=face_height,
            head_unit=head_unit(face_width, face_height),
            center=center.translated(offset.x, offset.y),
            offset=offset,
        )


_default_builder = ReferenceFrameBuilder()


def build_reference_frame(
    landmarks: Sequence,
    surface_size: Tuple[int, int],
    config: RenderConfig
) -> ReferenceFrame:
    """기본 FaceMesh 인덱스로 ReferenceFrame 생성"""
    return _default_builder.build(landmarks, surface_size, config)
