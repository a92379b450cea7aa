"""프레임 단위 렌더링 파이프라인"""

from typing import Optional, Sequence, Tuple

import numpy as np

from ..config.constants import NO_FACE_NOTE
from ..config.settings import RenderConfig
from ..core.mirror import mirrored
from ..core.reference_frame import ReferenceFrameBuilder
from ..core.surface import Surface
from ..models import FrameResult, FrameState, TrackingState
from ..utils import get_logger
from .asset_compositor import render_asset
from .styles import render_style

logger = get_logger(__name__)


class FrameOrchestrator:
    """
    프레임 드라이버

    상태 전이: IDLE → CLEARED → MIRRORED → (RENDERED | SKIPPED) → RESTORED → IDLE
    RESTORED 는 어떤 경로로 끝나든 항상 실행된다.
    """

    def __init__(self, surface: Surface, builder: ReferenceFrameBuilder = None):
        """
        초기화

        Args:
            surface: 그릴 표면
            builder: ReferenceFrame 생성기 (None이면 FaceMesh 기본 인덱스)
        """
        self.surface = surface
        self.builder = builder or ReferenceFrameBuilder()
        self.state = FrameState.IDLE
        self.last_tracking: Optional[TrackingState] = None
        self.frame_count = 0

    def render_frame(
        self,
        landmarks: Optional[Sequence],
        config: RenderConfig,
        asset: Optional[np.ndarray] = None,
        frame_size: Optional[Tuple[int, int]] = None
    ) -> FrameResult:
        """
        한 프레임 렌더링

        Args:
            landmarks: 트래커가 준 랜드마크 세트 (얼굴 없음: None 또는 빈 시퀀스)
            config: 이번 프레임의 렌더링 설정 스냅샷
            asset: 에셋 bitmap (config.use_asset 일 때만 사용)
            frame_size: 현재 비디오 (width, height). 다르면 표면 크기를 맞춤

        Returns:
            FrameResult: 추적 상태 및 거쳐간 상태 목록
        """
        states = []

        def enter(state: FrameState):
            self.state = state
            states.append(state)

        if frame_size is not None and self.surface.ensure_size(*frame_size):
            logger.info(f"Surface resized to {frame_size[0]}x{frame_size[1]}")

        self.surface.clear()
        enter(FrameState.CLEARED)

        reference = None
        tracking = TrackingState.NO_FACE
        used_asset = False

        try:
            with mirrored(self.surface, config.mirror):
                enter(FrameState.MIRRORED)

                if landmarks is not None and len(landmarks) > 0:
                    reference = self.builder.build(landmarks, self.surface.size, config)
                    if config.use_asset:
                        render_asset(reference, config, asset, self.surface)
                        used_asset = asset is not None
                    else:
                        render_style(reference, config, self.surface)
                    tracking = TrackingState.TRACKING
                    enter(FrameState.RENDERED)
                else:
                    enter(FrameState.SKIPPED)
        finally:
            enter(FrameState.RESTORED)
            enter(FrameState.IDLE)
            self.frame_count += 1

        if tracking is not self.last_tracking:
            logger.info(f"Tracking state: {tracking.value}")
            self.last_tracking = tracking

        return FrameResult(
            tracking=tracking,
            states=tuple(states),
            reference_frame=reference,
            used_asset=used_asset,
            note="" if tracking is TrackingState.TRACKING else NO_FACE_NOTE,
            metadata={
                'frame_number': self.frame_count - 1,
                'surface_size': self.surface.size,
                'style': config.style.value,
            },
        )
