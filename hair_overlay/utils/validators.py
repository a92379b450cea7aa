"""입력 검증 유틸리티 함수"""

from typing import Sequence

import numpy as np

from .exceptions import InvalidImageError, LandmarkSetError


def validate_image(image: np.ndarray) -> None:
    """
    이미지 유효성 검증

    Args:
        image: 검증할 이미지 (numpy array)

    Raises:
        InvalidImageError: 이미지가 유효하지 않은 경우
    """
    if image is None:
        raise InvalidImageError("Image is None")

    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")

    if image.size == 0:
        raise InvalidImageError("Image is empty")

    if len(image.shape) not in [2, 3]:
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")

    if len(image.shape) == 3 and image.shape[2] not in [1, 3, 4]:
        raise InvalidImageError(f"Image channels must be 1, 3, or 4, got {image.shape[2]}")


def validate_unit_interval(value: float, param_name: str = "value") -> None:
    """0.0 ~ 1.0 범위 검증"""
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{param_name} must be between 0.0 and 1.0, got {value}")


def validate_landmark_set(landmarks: Sequence, max_index: int) -> None:
    """
    랜드마크 세트 길이 검증

    인덱스의 의미(토폴로지)는 검증할 수 없고, 길이만 확인한다.

    Raises:
        LandmarkSetError: 기준점 인덱스보다 세트가 짧은 경우
    """
    if len(landmarks) <= max_index:
        raise LandmarkSetError(
            f"Landmark set has {len(landmarks)} points, "
            f"anchor index {max_index} is out of range"
        )
