"""스냅샷 합성 및 저장"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from ..core.surface import Surface
from ..utils import get_config, get_logger
from ..utils.exceptions import InvalidImageError
from ..utils.validators import validate_image

logger = get_logger(__name__)


def compose_snapshot(frame_bgr: np.ndarray, surface: Surface, mirror: bool) -> np.ndarray:
    """
    화면에 보이는 그대로 비디오 프레임 + 오버레이 합성

    오버레이는 이미 미러 변환으로 그려져 있으므로 비디오 프레임만 뒤집는다.

    Args:
        frame_bgr: 카메라 원본 프레임 (BGR)
        surface: 렌더링이 끝난 표면
        mirror: 미러 모드 여부
    """
    validate_image(frame_bgr)
    base = cv2.flip(frame_bgr, 1) if mirror else frame_bgr
    if base.shape[:2] != (surface.height, surface.width):
        base = cv2.resize(base, surface.size, interpolation=cv2.INTER_LINEAR)
    return surface.composite_over(base)


def save_snapshot(
    image_bgr: np.ndarray,
    directory: Optional[str] = None,
    filename: Optional[str] = None
) -> Path:
    """
    스냅샷 PNG 저장

    Args:
        image_bgr: 저장할 이미지
        directory: 저장 디렉토리 (None이면 config.snapshot.directory)
        filename: 파일 이름 또는 strftime 패턴 (None이면 config.snapshot.filename)

    Returns:
        저장된 파일 경로

    Raises:
        InvalidImageError: 이미지 인코딩/저장 실패 시
    """
    config = get_config()
    out_dir = Path(directory or config.snapshot.directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    name = datetime.now().strftime(filename or config.snapshot.filename)
    out_path = out_dir / name

    if not cv2.imwrite(str(out_path), image_bgr):
        raise InvalidImageError(f"Failed to write snapshot: {out_path}")

    logger.info(f"Snapshot saved: {out_path}")
    return out_path
