"""MediaPipe FaceMesh 기반 얼굴 추적기 (렌더러 입력용 랜드마크 공급)"""

import time
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from ..config.settings import TrackerConfig
from ..models import Landmark
from ..utils import get_logger
from ..utils.exceptions import ConfigurationError
from ..utils.validators import validate_image

logger = get_logger(__name__)


class FaceTracker:
    """MediaPipe FaceMesh 래퍼 (얼굴 1개)"""

    def __init__(self, config: TrackerConfig = None):
        """
        초기화

        Args:
            config: 추적 설정 (None이면 config.yaml 기본값)

        Raises:
            ConfigurationError: FaceMesh 초기화 실패 시
        """
        self.config = config or TrackerConfig.from_config()
        self.last_processing_time = 0.0

        try:
            self.face_mesh = mp.solutions.face_mesh.FaceMesh(
                static_image_mode=self.config.static_image_mode,
                max_num_faces=self.config.max_num_faces,
                refine_landmarks=self.config.refine_landmarks,
                min_detection_confidence=self.config.min_detection_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence
            )
            logger.info("MediaPipe FaceMesh initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize MediaPipe FaceMesh: {e}")
            raise ConfigurationError(f"Failed to initialize MediaPipe FaceMesh: {e}")

    def track(self, frame_bgr: np.ndarray) -> Optional[List[Landmark]]:
        """
        프레임에서 첫 번째 얼굴의 랜드마크 추출

        Args:
            frame_bgr: BGR 형식 이미지 (H, W, 3)

        Returns:
            정규화 Landmark 리스트, 얼굴이 없으면 None
        """
        validate_image(frame_bgr)
        start_time = time.time()

        # BGR → RGB 변환 (MediaPipe 요구사항)
        image_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(image_rgb)

        self.last_processing_time = (time.time() - start_time) * 1000  # ms

        if not results or not results.multi_face_landmarks:
            logger.debug("No face detected")
            return None

        face_landmarks = results.multi_face_landmarks[0]
        return [
            Landmark(x=lm.x, y=lm.y, z=lm.z)
            for lm in face_landmarks.landmark
        ]

    def release(self):
        """리소스 해제"""
        if getattr(self, 'face_mesh', None) is not None:
            self.face_mesh.close()
            self.face_mesh = None

    def __enter__(self) -> "FaceTracker":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
